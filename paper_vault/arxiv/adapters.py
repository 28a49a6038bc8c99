"""arXiv adapter: the native feed of the search aggregator."""

import logging
import re
from typing import Callable

import arxiv

from ..paper_sources.models import (
    PaperRecord,
    SearchField,
    SearchRequest,
    SortKey,
    SortOrder,
    SourceTag,
)
from .client import ArXivClient

logger = logging.getLogger(__name__)

_WORD_JUNK = re.compile(r"[^A-Za-z0-9_\-.]")
_WHITESPACE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Query expressions
# ---------------------------------------------------------------------------


def _quoted(query: str) -> str:
    return '"' + query.replace('"', '\\"') + '"'


def _query_words(query: str) -> list[str]:
    words = (_WORD_JUNK.sub("", w) for w in query.split())
    return [w for w in words if w]


def _phrase_or_all_words(prefix: str, query: str) -> str:
    """Phrase match OR every word matched in the same field."""
    words = _query_words(query)
    if not words:
        return f"{prefix}:{_quoted(query)}"
    all_words = " AND ".join(f"{prefix}:{w}" for w in words)
    return f"({prefix}:{_quoted(query)} OR ({all_words}))"


def _title_query(query: str) -> str:
    return _phrase_or_all_words("ti", query)


def _author_query(query: str) -> str:
    return _phrase_or_all_words("au", query)


def _abstract_query(query: str) -> str:
    return f"abs:{query}"


def _all_query(query: str) -> str:
    return f"all:{query}"


def _smart_query(query: str) -> str:
    return f"(ti:{query} OR abs:{query})"


QUERY_BUILDERS: dict[SearchField, Callable[[str], str]] = {
    SearchField.TITLE: _title_query,
    SearchField.AUTHOR: _author_query,
    SearchField.ABSTRACT: _abstract_query,
    SearchField.ALL: _all_query,
    SearchField.SMART: _smart_query,
}


def build_search_query(field: SearchField, query: str) -> str:
    """Build the arXiv search_query expression for a field-scoped query."""
    return QUERY_BUILDERS[field](query.strip())


# citations has no arXiv equivalent; that order is computed after merging
SORT_CRITERIA = {
    SortKey.RELEVANCE: arxiv.SortCriterion.Relevance,
    SortKey.CITATIONS: arxiv.SortCriterion.Relevance,
    SortKey.SUBMITTED_DATE: arxiv.SortCriterion.SubmittedDate,
    SortKey.LAST_UPDATED_DATE: arxiv.SortCriterion.LastUpdatedDate,
}

SORT_ORDERS = {
    SortOrder.ASCENDING: arxiv.SortOrder.Ascending,
    SortOrder.DESCENDING: arxiv.SortOrder.Descending,
}


# ---------------------------------------------------------------------------
# Result conversion
# ---------------------------------------------------------------------------


def _extract_arxiv_id(entry_id: str) -> str:
    """Extract the (versioned) arXiv ID from an entry URL.

    Example: "http://arxiv.org/abs/2301.00001v1" -> "2301.00001v1"
    """
    return entry_id.split("/abs/")[-1]


def _clean(text: str | None) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def result_to_record(result: arxiv.Result) -> PaperRecord:
    """Convert an arxiv.Result to a PaperRecord."""
    entry_id = result.entry_id
    published = (
        result.published.strftime("%Y-%m-%dT%H:%M:%SZ") if result.published else ""
    )

    return PaperRecord(
        id=_extract_arxiv_id(entry_id),
        title=_clean(result.title),
        authors_display=", ".join(author.name for author in result.authors),
        abstract_text=_clean(result.summary),
        published_date=published,
        landing_url=entry_id,
        pdf_url=result.pdf_url or entry_id.replace("/abs/", "/pdf/"),
        doi=result.doi or None,
        source_tag=SourceTag.ARXIV,
    )


class ArXivAdapter:
    """
    Adapter for arXiv API implementing PaperSearchProvider and PaperLookupProvider.

    Usage:
        async with ArXivAdapter() as adapter:
            page = await adapter.search_papers(SearchRequest(query="diffusion models"))
            canonical = await adapter.fetch_papers(["2301.00001"])
    """

    def __init__(
        self,
        rate_limit_seconds: float = 3.0,
        client: ArXivClient | None = None,
    ):
        """
        Initialize arXiv adapter.

        Args:
            rate_limit_seconds: Minimum seconds between requests (default: 3.0)
            client: Optional pre-built client (used by tests)
        """
        self._client = client or ArXivClient(rate_limit_seconds=rate_limit_seconds)
        self._entered = False

    async def __aenter__(self) -> "ArXivAdapter":
        """Enter async context."""
        self._entered = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context."""
        self._entered = False

    def _ensure_entered(self) -> None:
        """Ensure adapter is properly initialized."""
        if not self._entered:
            raise RuntimeError(
                "ArXivAdapter not initialized. Use 'async with' context manager."
            )

    async def search_papers(self, request: SearchRequest) -> list[PaperRecord]:
        """
        Search arXiv for one window of results.

        Failures are not caught here: arXiv is the primary source, so a
        failing search fails the whole request.
        """
        self._ensure_entered()

        if not request.query.strip():
            return []

        results = await self._client.search(
            query=build_search_query(request.field, request.query),
            start=request.start,
            max_results=request.max_results,
            sort_by=SORT_CRITERIA[request.sort],
            sort_order=SORT_ORDERS[request.order],
        )
        return [result_to_record(r) for r in results]

    async def fetch_papers(self, paper_ids: list[str]) -> list[PaperRecord]:
        """
        Fetch canonical records for arXiv IDs in one batched call.

        Args:
            paper_ids: arXiv IDs, e.g. "2301.00001" or "2301.00001v2"

        Returns:
            List of PaperRecord objects
        """
        self._ensure_entered()

        if not paper_ids:
            return []

        results = await self._client.get_papers(paper_ids)
        return [result_to_record(r) for r in results]
