"""Async HTTP client for the OpenAlex API."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from ..errors import MalformedPayloadError
from ..http_client import AsyncAPIClient
from ..settings import OPENALEX_BASE_URL, OPENALEX_MAILTO
from .models import AuthorsResponse, WorksResponse

logger = logging.getLogger(__name__)


class OpenAlexClient(AsyncAPIClient):
    """Async client for the OpenAlex /works and /authors endpoints."""

    source_name = "openalex"

    def __init__(
        self,
        mailto: str | None = None,
        base_url: str = OPENALEX_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.mailto = mailto or OPENALEX_MAILTO
        super().__init__(
            base_url=base_url,
            requests_per_second=10.0,
            transport=transport,
        )

    async def __aenter__(self) -> "OpenAlexClient":
        await super().__aenter__()
        return self

    def _params(self, **params: Any) -> dict[str, Any]:
        if self.mailto:
            params["mailto"] = self.mailto
        return params

    async def list_works(self, **params: Any) -> WorksResponse:
        """Query the /works endpoint (filter, search, sort, page, per_page)."""
        logger.debug(f"OpenAlex works params: {params}")
        data = await self.get_json("/works", params=self._params(**params))
        try:
            return WorksResponse.model_validate(data)
        except ValidationError as e:
            raise MalformedPayloadError(
                self.source_name, f"Unexpected /works payload: {e}"
            ) from e

    async def search_authors(self, name: str, per_page: int = 10) -> AuthorsResponse:
        """Free-text search of the /authors endpoint."""
        logger.info(f"OpenAlex author search: '{name}'")
        data = await self.get_json(
            "/authors",
            params=self._params(search=name, per_page=per_page),
        )
        try:
            return AuthorsResponse.model_validate(data)
        except ValidationError as e:
            raise MalformedPayloadError(
                self.source_name, f"Unexpected /authors payload: {e}"
            ) from e
