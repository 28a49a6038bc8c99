"""Composite search provider aggregating arXiv, OpenAlex and citation counts."""

import asyncio
import logging

from ..errors import DataSourceError
from ..settings import (
    CANDIDATE_POOL_MAX,
    CANDIDATE_POOL_MIN,
    CANDIDATE_POOL_MULTIPLIER,
    RELEVANCE_CITATION_BOOST,
)
from .author_filter import filter_by_author
from .bridge import CitationBridge
from .deduplication import deduplicate_papers, filter_against_native
from .linking import link_to_arxiv
from .models import PaperRecord, SearchField, SearchRequest, SortKey
from .protocols import PaperSearchProvider
from .ranking import (
    candidate_pool_size,
    interleave,
    paginate,
    rank_papers,
)

logger = logging.getLogger(__name__)


class CompositeSearchProvider:
    """
    Aggregates the arXiv feed and the OpenAlex works index into one ranked list.

    Pipeline per request: both sources concurrently -> link OpenAlex records
    that are arXiv papers -> author filter (author field only) -> dedup with
    arXiv precedence -> citation enrichment -> ranking -> page slice.

    arXiv is the primary source: its search failures propagate. OpenAlex and
    the citation bridge are best-effort and degrade to "no contribution".

    Usage:
        from paper_vault.arxiv import ArXivAdapter
        from paper_vault.openalex import OpenAlexAdapter
        from paper_vault.semantic_scholar import SemanticScholarAdapter

        async with CompositeSearchProvider(
            arxiv=ArXivAdapter(),
            works=OpenAlexAdapter(),
            citation_provider=SemanticScholarAdapter(),
        ) as composite:
            page = await composite.search_papers(SearchRequest(query="diffusion models"))
    """

    def __init__(
        self,
        arxiv: PaperSearchProvider,
        works: PaperSearchProvider | None = None,
        citation_provider=None,
        pool_min: int = CANDIDATE_POOL_MIN,
        pool_max: int = CANDIDATE_POOL_MAX,
        pool_multiplier: int = CANDIDATE_POOL_MULTIPLIER,
        citation_boost: float = RELEVANCE_CITATION_BOOST,
    ):
        """
        Initialize composite provider.

        Args:
            arxiv: Native-feed adapter; must also implement PaperLookupProvider
            works: Works-index adapter (None disables the second source)
            citation_provider: CitationProvider for enrichment (None disables it)
            pool_min: Smallest candidate pool for non-relevance sorts
            pool_max: Largest candidate pool for non-relevance sorts
            pool_multiplier: Pool size per requested row
            citation_boost: Weight of citations in relevance mode
        """
        self._arxiv = arxiv
        self._works = works
        self._citation_provider = citation_provider
        self._bridge = CitationBridge(citation_provider) if citation_provider else None
        self._pool_min = pool_min
        self._pool_max = pool_max
        self._pool_multiplier = pool_multiplier
        self._citation_boost = citation_boost

    @property
    def _children(self) -> list:
        return [p for p in (self._arxiv, self._works, self._citation_provider) if p]

    async def __aenter__(self) -> "CompositeSearchProvider":
        """Enter async context for all providers."""
        for provider in self._children:
            if hasattr(provider, "__aenter__"):
                await provider.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context for all providers."""
        for provider in self._children:
            if hasattr(provider, "__aexit__"):
                await provider.__aexit__(exc_type, exc_val, exc_tb)

    async def search_papers(self, request: SearchRequest) -> list[PaperRecord]:
        """Search both sources and return the requested page of the merged ranking."""
        if not request.query.strip():
            return []

        if request.sort is SortKey.RELEVANCE:
            return await self._search_page(request)
        return await self._search_pool(request)

    async def fetch_papers(self, paper_ids: list[str]) -> list[PaperRecord]:
        """Canonical arXiv records for arXiv ids."""
        return await self._arxiv.fetch_papers(paper_ids)

    async def _search_page(self, request: SearchRequest) -> list[PaperRecord]:
        """Relevance: interleave the two sources' own pages, then score."""
        native, works = await self._gather(request)
        merged = interleave(native, filter_against_native(native, works))
        papers = await self._finish(merged, request)
        return papers[: request.max_results]

    async def _search_pool(self, request: SearchRequest) -> list[PaperRecord]:
        """Date and citation sorts: rank a global pool fetched from offset zero."""
        pool_size = candidate_pool_size(
            request.start,
            request.max_results,
            minimum=self._pool_min,
            maximum=self._pool_max,
            multiplier=self._pool_multiplier,
        )
        logger.info(f"Building candidate pool of {pool_size} per source")

        native, works = await self._gather(request.window(0, pool_size))
        merged = native + filter_against_native(native, works)
        papers = await self._finish(merged, request)
        return paginate(papers, request.start, request.max_results)

    async def _gather(
        self, request: SearchRequest
    ) -> tuple[list[PaperRecord], list[PaperRecord]]:
        """Run both sources concurrently, link, and apply the author filter."""
        # both searches settle before any failure propagates
        native, works = await asyncio.gather(
            self._arxiv.search_papers(request),
            self._search_works(request),
            return_exceptions=True,
        )
        if isinstance(native, BaseException):
            raise native
        if isinstance(works, BaseException):
            raise works
        logger.info(f"Sources returned {len(native)} arXiv and {len(works)} OpenAlex records")

        works = await link_to_arxiv(works, self._arxiv)

        if request.field is SearchField.AUTHOR:
            native = filter_by_author(native, request.query)
            works = filter_by_author(works, request.query)

        return native, works

    async def _search_works(self, request: SearchRequest) -> list[PaperRecord]:
        if self._works is None:
            return []
        try:
            return await self._works.search_papers(request)
        except DataSourceError as e:
            logger.warning(f"Works index search failed, continuing without it: {e}")
            return []

    async def _finish(
        self, merged: list[PaperRecord], request: SearchRequest
    ) -> list[PaperRecord]:
        papers = deduplicate_papers(merged)
        if self._bridge is not None:
            papers = await self._bridge.enrich(papers)
        return rank_papers(papers, request.sort, request.order, self._citation_boost)
