"""arXiv API integration: the native metadata feed.

Usage:
    from paper_vault.arxiv import ArXivAdapter

    async with ArXivAdapter() as adapter:
        page = await adapter.search_papers(SearchRequest(query="transformer attention"))
        canonical = await adapter.fetch_papers([r.id for r in page])
"""

from .adapters import ArXivAdapter, build_search_query
from .client import ArXivClient

__all__ = ["ArXivAdapter", "ArXivClient", "build_search_query"]
