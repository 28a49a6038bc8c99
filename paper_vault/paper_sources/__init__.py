"""Paper sources module for multi-provider paper search.

This module merges the arXiv feed and the OpenAlex works index into one
deduplicated, citation-enriched and ranked result list.

Usage:
    from paper_vault.paper_sources import CompositeSearchProvider, SearchRequest
    from paper_vault.config import load_config, create_search_provider

    # Using factory function
    provider = create_search_provider(load_config())

    async with provider:
        page = await provider.search_papers(SearchRequest(query="diffusion models"))
"""

from .models import (
    PaperRecord,
    SearchField,
    SearchRequest,
    SortKey,
    SortOrder,
    SourceTag,
)
from .composite import CompositeSearchProvider
from .deduplication import deduplicate_papers, filter_against_native
from .bridge import CitationBridge, citation_key
from .linking import link_to_arxiv
from .author_filter import author_matches, filter_by_author
from .ranking import candidate_pool_size, rank_papers

__all__ = [
    # Models
    "PaperRecord",
    "SearchField",
    "SearchRequest",
    "SortKey",
    "SortOrder",
    "SourceTag",
    # Pipeline
    "CompositeSearchProvider",
    "deduplicate_papers",
    "filter_against_native",
    "CitationBridge",
    "citation_key",
    "link_to_arxiv",
    "author_matches",
    "filter_by_author",
    "candidate_pool_size",
    "rank_papers",
]
