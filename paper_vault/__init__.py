"""Paper vault: one search box over arXiv and OpenAlex."""

from .search import search_papers, fetch_papers

__all__ = [
    "search_papers",
    "fetch_papers",
]
