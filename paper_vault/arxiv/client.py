"""Low-level arXiv API client with rate limiting."""

import asyncio
import logging
import time

import arxiv

from ..errors import SourceUnavailableError
from ..settings import ARXIV_RATE_LIMIT_SECONDS, MAX_RETRIES

logger = logging.getLogger(__name__)

# Largest page the arXiv API will serve in one response
MAX_PAGE_SIZE = 2000


class ArXivRateLimiter:
    """Rate limiter enforcing minimum delay between arXiv requests."""

    def __init__(self, min_interval: float = 3.0):
        """
        Initialize rate limiter.

        Args:
            min_interval: Minimum seconds between requests (default: 3.0 per arXiv guidelines)
        """
        self._min_interval = min_interval
        self._last_request_time: float = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        """Acquire rate limit slot, waiting if necessary."""
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time
            if elapsed < self._min_interval:
                await asyncio.sleep(self._min_interval - elapsed)
            self._last_request_time = time.monotonic()


class ArXivClient:
    """Async wrapper around the arxiv Python library."""

    source_name = "arxiv"

    def __init__(
        self,
        rate_limit_seconds: float = ARXIV_RATE_LIMIT_SECONDS,
        max_retries: int = MAX_RETRIES,
    ):
        """
        Initialize arXiv client.

        Args:
            rate_limit_seconds: Minimum seconds between requests
            max_retries: Retries the arxiv library may attempt per page
        """
        self._rate_limiter = ArXivRateLimiter(rate_limit_seconds)
        self._max_retries = max_retries

    def _make_client(self, page_size: int) -> arxiv.Client:
        # Page size equals the requested window so one window is one API call
        return arxiv.Client(
            page_size=max(1, min(page_size, MAX_PAGE_SIZE)),
            delay_seconds=0,  # We handle rate limiting ourselves
            num_retries=self._max_retries,
        )

    async def _run(self, search: arxiv.Search, page_size: int, offset: int = 0) -> list[arxiv.Result]:
        client = self._make_client(page_size)
        await self._rate_limiter.acquire()
        try:
            return await asyncio.to_thread(
                lambda: list(client.results(search, offset=offset))
            )
        except arxiv.ArxivError as e:
            raise SourceUnavailableError(self.source_name, str(e)) from e
        except OSError as e:  # requests' connection errors derive from OSError
            raise SourceUnavailableError(
                self.source_name, f"Connection error: {e}"
            ) from e

    async def search(
        self,
        query: str,
        start: int = 0,
        max_results: int = 10,
        sort_by: arxiv.SortCriterion = arxiv.SortCriterion.Relevance,
        sort_order: arxiv.SortOrder = arxiv.SortOrder.Descending,
    ) -> list[arxiv.Result]:
        """
        Search arXiv for one window of results.

        Args:
            query: Search query (arXiv query syntax, e.g. 'ti:"graph neural"')
            start: Offset of the first result
            max_results: Size of the window
            sort_by: Sort criterion (Relevance, LastUpdatedDate, SubmittedDate)
            sort_order: Sort order (Ascending, Descending)

        Returns:
            List of arxiv.Result objects
        """
        # The library's max_results counts from result zero, offset included
        search = arxiv.Search(
            query=query,
            max_results=start + max_results,
            sort_by=sort_by,
            sort_order=sort_order,
        )

        logger.info(
            f"arXiv search: query='{query}', start={start}, max_results={max_results}"
        )
        results = await self._run(search, page_size=max_results, offset=start)

        logger.debug(f"arXiv search '{query}' returned {len(results)} results")
        return results

    async def get_papers(self, arxiv_ids: list[str]) -> list[arxiv.Result]:
        """
        Fetch multiple papers by arXiv ID in one request.

        Args:
            arxiv_ids: List of arXiv paper IDs (versioned or not)

        Returns:
            List of arxiv.Result objects
        """
        clean_ids = [
            id.removeprefix("arxiv:").removeprefix("arXiv:") for id in arxiv_ids
        ]
        if not clean_ids:
            return []

        search = arxiv.Search(id_list=clean_ids, max_results=len(clean_ids))
        logger.info(f"arXiv id lookup: {len(clean_ids)} ids")
        return await self._run(search, page_size=len(clean_ids))
