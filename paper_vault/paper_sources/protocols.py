"""Protocol definitions for paper sources and the citation service."""

from typing import Protocol, runtime_checkable

from ..semantic_scholar.models import CitationCounts
from .models import PaperRecord, SearchRequest


@runtime_checkable
class PaperSearchProvider(Protocol):
    """Protocol for paper search providers.

    Implement this protocol to add support for new paper search APIs.
    """

    async def search_papers(self, request: SearchRequest) -> list[PaperRecord]:
        """
        Search for papers matching the request's query, field and sort.

        Args:
            request: Query plus paging window and sort selection

        Returns:
            At most ``request.max_results`` records starting at ``request.start``
        """
        ...


@runtime_checkable
class PaperLookupProvider(Protocol):
    """Protocol for sources that can resolve their own identifiers."""

    async def fetch_papers(self, paper_ids: list[str]) -> list[PaperRecord]:
        """
        Fetch canonical records for source-native identifiers in one batch.

        Args:
            paper_ids: Identifiers native to the source (e.g. arXiv ids)

        Returns:
            Records found; unknown identifiers are simply absent
        """
        ...


@runtime_checkable
class CitationProvider(Protocol):
    """Protocol for batch citation-count lookups."""

    async def get_citation_counts(
        self,
        keys: list[str],
    ) -> list[CitationCounts | None]:
        """
        Look up citation counts for lookup keys such as "DOI:..." or "ARXIV:...".

        Returns:
            One entry per key, in request order; None where the paper is unknown
        """
        ...
