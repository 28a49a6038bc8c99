"""OpenAlex adapter: the works index of the search aggregator."""

import logging
import re

import httpx

from ..errors import DataSourceError
from ..paper_sources.identity import normalize_doi
from ..paper_sources.models import (
    PaperRecord,
    SearchField,
    SearchRequest,
    SortKey,
    SourceTag,
)
from ..settings import OPENALEX_MAX_PAGES, OPENALEX_PAGE_SIZE
from .client import OpenAlexClient
from .models import Location, Work

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
# "," separates filters and "|" ORs values in the OpenAlex filter syntax
_FILTER_UNSAFE = re.compile(r"[,|]")

FIELD_FILTERS = {
    SearchField.SMART: "title_and_abstract.search",
    SearchField.TITLE: "title.search",
    SearchField.ABSTRACT: "abstract.search",
}


def reconstruct_abstract(inverted_index: dict[str, list[int]] | None) -> str:
    """
    Rebuild abstract text from OpenAlex's word -> positions index.

    Example: {"deep": [0, 3], "learning": [1]} -> "deep learning deep"
    """
    if not inverted_index:
        return ""
    positioned = [
        (position, word)
        for word, positions in inverted_index.items()
        for position in positions
    ]
    positioned.sort(key=lambda pair: pair[0])
    return " ".join(word for _, word in positioned)


def _clean(text: str | None) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def work_to_record(work: Work) -> PaperRecord | None:
    """Convert a Work to a PaperRecord; None when it has no landing URL."""
    title = _clean(work.display_name or work.title)
    doi = normalize_doi(work.doi) or None

    primary = work.primary_location or Location()
    best = work.best_oa_location or Location()
    landing_url = (
        primary.landing_page_url
        or best.landing_page_url
        or (f"https://doi.org/{doi}" if doi else "")
    )
    if not landing_url:
        return None

    native_id = work.short_id or title
    if not native_id:
        return None

    if work.publication_date:
        published = work.publication_date
    elif work.publication_year:
        published = str(work.publication_year)
    else:
        published = ""

    authors = [
        a.author.display_name
        for a in work.authorships or []
        if a.author and a.author.display_name
    ]

    return PaperRecord(
        id=f"openalex:{native_id}",
        title=title,
        authors_display=", ".join(authors),
        abstract_text=reconstruct_abstract(work.abstract_inverted_index),
        published_date=published,
        landing_url=landing_url,
        pdf_url=primary.pdf_url or best.pdf_url or "",
        doi=doi,
        source_tag=SourceTag.OPENALEX,
    )


def _sort_param(request: SearchRequest, has_search: bool) -> str:
    direction = "desc" if request.descending else "asc"
    if request.sort in (SortKey.SUBMITTED_DATE, SortKey.LAST_UPDATED_DATE):
        return f"publication_date:{direction}"
    if request.sort is SortKey.CITATIONS:
        return f"cited_by_count:{direction}"
    # relevance_score is only defined with "search" or a ".search" filter
    return "relevance_score:desc" if has_search else "cited_by_count:desc"


class OpenAlexAdapter:
    """
    Adapter for the OpenAlex works index implementing PaperSearchProvider.

    Usage:
        async with OpenAlexAdapter(mailto="me@example.org") as adapter:
            page = await adapter.search_papers(SearchRequest(query="diffusion models"))
    """

    def __init__(
        self,
        mailto: str | None = None,
        page_size: int = OPENALEX_PAGE_SIZE,
        max_pages: int = OPENALEX_MAX_PAGES,
        author_candidates: int = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize OpenAlex adapter.

        Args:
            mailto: Contact email for the OpenAlex polite pool
            page_size: Works requested per internal page
            max_pages: Safety cap on internal pages per search
            author_candidates: Author ids considered for author-field queries
            transport: Optional httpx transport (used by tests)
        """
        self._client = OpenAlexClient(mailto=mailto, transport=transport)
        self._page_size = page_size
        self._max_pages = max_pages
        self._author_candidates = author_candidates
        self._entered = False

    async def __aenter__(self) -> "OpenAlexAdapter":
        await self._client.__aenter__()
        self._entered = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self._client.__aexit__(exc_type, exc_val, exc_tb)
        self._entered = False

    def _ensure_entered(self) -> None:
        if not self._entered:
            raise RuntimeError(
                "OpenAlexAdapter not initialized. Use 'async with' context manager."
            )

    async def resolve_author_ids(self, name: str) -> list[str]:
        """Candidate OpenAlex author ids for a free-text name (best-effort)."""
        try:
            response = await self._client.search_authors(
                name, per_page=self._author_candidates
            )
        except DataSourceError as e:
            logger.warning(f"Author lookup failed for '{name}': {e}")
            return []
        return [author.short_id for author in response.results if author.short_id]

    async def _query_params(self, request: SearchRequest) -> dict[str, str] | None:
        """Filter/search/sort params for a request; None when nothing can match."""
        query = request.query.strip()
        params: dict[str, str] = {}

        if request.field is SearchField.AUTHOR:
            author_ids = await self.resolve_author_ids(query)
            if not author_ids:
                logger.info(f"No OpenAlex authors match '{query}'")
                return None
            params["filter"] = "authorships.author.id:" + "|".join(author_ids)
        elif request.field is SearchField.ALL:
            params["search"] = query
        else:
            value = _FILTER_UNSAFE.sub(" ", query)
            params["filter"] = f"{FIELD_FILTERS[request.field]}:{value}"

        has_search = "search" in params or ".search:" in params.get("filter", "")
        params["sort"] = _sort_param(request, has_search)
        return params

    async def search_papers(self, request: SearchRequest) -> list[PaperRecord]:
        """
        Search the works index for one window of results.

        Pages through /works until ``start + max_results`` usable records are
        collected, the index runs out, or ``max_pages`` pages were requested.

        Raises:
            DataSourceError: on upstream failure (callers treat this source
                as best-effort)
        """
        self._ensure_entered()

        if not request.query.strip():
            return []

        params = await self._query_params(request)
        if params is None:
            return []

        needed = request.start + request.max_results
        records: list[PaperRecord] = []

        for page in range(1, self._max_pages + 1):
            response = await self._client.list_works(
                **params, page=page, per_page=self._page_size
            )
            for work in response.results:
                record = work_to_record(work)
                if record is not None:
                    records.append(record)

            if len(records) >= needed or len(response.results) < self._page_size:
                break
        else:
            logger.info(f"OpenAlex page cap ({self._max_pages}) reached")

        logger.info(f"OpenAlex returned {len(records)} usable works (needed {needed})")
        return records[request.start : needed]
