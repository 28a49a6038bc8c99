"""Adapter exposing Semantic Scholar as a citation-count provider."""

import logging

import httpx
from pydantic import ValidationError

from ..errors import MalformedPayloadError
from .client import SemanticScholarClient
from .models import CitationCounts

logger = logging.getLogger(__name__)

# /paper/batch accepts at most 500 ids per call
BATCH_SIZE = 500


class SemanticScholarAdapter:
    """
    Adapter for Semantic Scholar API.

    Implements the CitationProvider protocol.

    Usage:
        async with SemanticScholarAdapter() as adapter:
            counts = await adapter.get_citation_counts(["DOI:10.1/x", "ARXIV:2301.00001"])
    """

    def __init__(
        self,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the Semantic Scholar adapter.

        Args:
            api_key: Optional API key. If not provided, uses SEMANTIC_SCHOLAR_API_KEY
                    environment variable.
            transport: Optional httpx transport (used by tests)
        """
        self._client = SemanticScholarClient(api_key=api_key, transport=transport)
        self._entered = False

    async def __aenter__(self) -> "SemanticScholarAdapter":
        await self._client.__aenter__()
        self._entered = True
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self._client.__aexit__(exc_type, exc_val, exc_tb)
        self._entered = False

    def _ensure_entered(self) -> None:
        if not self._entered:
            raise RuntimeError(
                "Adapter not initialized. Use 'async with' context manager."
            )

    async def get_citation_counts(
        self,
        keys: list[str],
    ) -> list[CitationCounts | None]:
        """
        Look up citation counts, one entry per key in request order.

        Raises:
            SourceUnavailableError: the service could not be reached
            MalformedPayloadError: the response is not aligned with the request
        """
        self._ensure_entered()

        if not keys:
            return []

        results: list[CitationCounts | None] = []
        for i in range(0, len(keys), BATCH_SIZE):
            batch = keys[i : i + BATCH_SIZE]
            payload = await self._client.get_paper_batch(batch)

            if not isinstance(payload, list) or len(payload) != len(batch):
                raise MalformedPayloadError(
                    self._client.source_name,
                    f"Expected {len(batch)} batch entries, got "
                    f"{len(payload) if isinstance(payload, list) else type(payload).__name__}",
                )

            for item in payload:
                if item is None:  # API returns null for papers it doesn't know
                    results.append(None)
                    continue
                try:
                    results.append(CitationCounts.model_validate(item))
                except ValidationError as e:
                    raise MalformedPayloadError(
                        self._client.source_name, f"Invalid batch entry: {e}"
                    ) from e

        return results
