"""Async HTTP client for the Semantic Scholar Graph API."""

import logging
from typing import Any

import httpx

from ..http_client import AsyncAPIClient
from ..settings import (
    RATE_LIMIT_REQUESTS_PER_SECOND,
    RATE_LIMIT_REQUESTS_PER_SECOND_NO_KEY,
    SEMANTIC_SCHOLAR_API_KEY,
    SEMANTIC_SCHOLAR_BASE_URL,
)

logger = logging.getLogger(__name__)

CITATION_FIELDS = [
    "paperId",
    "externalIds",
    "citationCount",
    "influentialCitationCount",
]


class SemanticScholarClient(AsyncAPIClient):
    """Async client for Semantic Scholar API."""

    source_name = "semantic_scholar"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = SEMANTIC_SCHOLAR_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key or SEMANTIC_SCHOLAR_API_KEY

        # Set rate limit based on whether we have an API key
        rate_limit = (
            RATE_LIMIT_REQUESTS_PER_SECOND
            if self.api_key
            else RATE_LIMIT_REQUESTS_PER_SECOND_NO_KEY
        )

        headers: dict[str, str] = {}
        if self.api_key:
            headers["x-api-key"] = self.api_key
            logger.info("Semantic Scholar client initialized with API key")
        else:
            logger.warning("No API key provided - rate limiting will be strict")

        super().__init__(
            base_url=base_url,
            headers=headers,
            requests_per_second=rate_limit,
            transport=transport,
        )

    async def __aenter__(self) -> "SemanticScholarClient":
        await super().__aenter__()
        return self

    async def get_paper_batch(
        self,
        paper_ids: list[str],
        fields: list[str] | None = None,
    ) -> list[dict[str, Any] | None]:
        """Fetch multiple papers by ID using the /paper/batch endpoint.

        The response is aligned with ``paper_ids``; unknown ids come back as null.
        """
        params = {"fields": ",".join(fields or CITATION_FIELDS)}

        logger.info(f"Fetching paper batch: {len(paper_ids)} ids")
        return await self.post_json(
            "/paper/batch",
            params=params,
            json={"ids": paper_ids},
        )
