"""Search functions for the aggregated paper search.

This module provides convenience functions that work with any PaperSearchProvider.
By default, it builds the composite provider from the active config profile.
"""

from .config import create_search_provider, load_config
from .paper_sources.models import PaperRecord, SearchRequest
from .paper_sources.protocols import PaperLookupProvider, PaperSearchProvider


async def search_papers(
    query: str,
    max_results: int = 10,
    start: int = 0,
    field: str = "smart",
    sort: str = "relevance",
    order: str = "descending",
    provider: PaperSearchProvider | None = None,
    profile: str | None = None,
) -> list[PaperRecord]:
    """
    Search for papers across arXiv and OpenAlex.

    Args:
        query: Search query string
        max_results: Page size (default 10)
        start: Offset of the page in the merged ranking
        field: smart, title, author, abstract or all
        sort: relevance, submittedDate, lastUpdatedDate or citations
        order: ascending or descending
        provider: Optional provider implementing PaperSearchProvider protocol.
                  If not provided, builds one from the config profile.
        profile: Config profile name used when no provider is given

    Returns:
        List of PaperRecord objects

    Example:
        # Using the configured sources
        papers = await search_papers("graph neural networks", sort="citations")

        # Using custom provider
        async with MyCustomProvider() as provider:
            papers = await search_papers("graph neural networks", provider=provider)
    """
    request = SearchRequest(
        query=query,
        max_results=max_results,
        start=start,
        field=field,
        sort=sort,
        order=order,
    )
    if provider:
        return await provider.search_papers(request)
    else:
        async with create_search_provider(load_config(profile)) as composite:
            return await composite.search_papers(request)


async def fetch_papers(
    paper_ids: list[str],
    provider: PaperLookupProvider | None = None,
    profile: str | None = None,
) -> list[PaperRecord]:
    """
    Fetch canonical arXiv records by arXiv id.

    Args:
        paper_ids: arXiv ids, with or without version suffix
        provider: Optional provider implementing PaperLookupProvider protocol.
        profile: Config profile name used when no provider is given

    Returns:
        List of PaperRecord objects, in the order arXiv returns them
    """
    if provider:
        return await provider.fetch_papers(paper_ids)
    else:
        async with create_search_provider(load_config(profile)) as composite:
            return await composite.fetch_papers(paper_ids)
