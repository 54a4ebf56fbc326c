"""Fetcher facade for the mirrored music metadata API."""

import asyncio
import logging
import threading
from typing import Callable, Iterator, List, Optional
from urllib.parse import quote_plus

import httpx

from .cache import SearchCache, TrendingCache
from .exceptions import EndOfResults, RetryRequested
from .executor import RequestExecutor
from .models import FetcherConfig, MusicUnit
from .pool import ServerPool
from .transform import transform_music_units

logger = logging.getLogger(__name__)

MUSIC_FIELDS = "fields=videoId,title,author,lengthSeconds"


class Fetcher:
    """Resilient client for a pool of mirrored API servers.

    The Fetcher owns all state: the server pool, the request executor and
    the trending and search caches. Nothing is shared between instances.
    Every public page request runs under one lock, so a Fetcher can be
    shared between threads, but requests are served one at a time.

    Attributes:
        config: FetcherConfig in use
        pool: ServerPool of mirrors
        executor: RequestExecutor issuing the HTTP requests
        trending: TrendingCache for the trending list
        search: SearchCache for the active search session

    Example:
        >>> with Fetcher() as fetcher:
        ...     for page in fetcher.iter_trending_music():
        ...         for unit in page:
        ...             print(unit.name, unit.duration)
    """

    def __init__(
        self,
        config: Optional[FetcherConfig] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """Initialize the fetcher.

        Args:
            config: FetcherConfig (default: FetcherConfig())
            http_client: Optional httpx.Client to issue requests with
        """
        self.config = config or FetcherConfig()
        self.pool = ServerPool(self.config.servers)
        self.executor = RequestExecutor(self.pool, self.config, client=http_client)
        self.trending = TrendingCache(self.config.page_size)
        self.search = SearchCache(self.config.page_size)
        self._lock = threading.Lock()

        logger.info(f"Initialized fetcher with {len(self.pool)} servers")

    @property
    def active_server(self) -> str:
        return self.pool.current_target()

    def change_server(self) -> str:
        """Switch to the next mirror and return its base URL."""
        with self._lock:
            return self.pool.rotate()

    def _trending_path(self) -> str:
        return f"/trending?type=Music&region={self.config.region}&{MUSIC_FIELDS}"

    def _search_path(self, query: str, backend_page: int) -> str:
        return (
            f"/search?q={quote_plus(query)}&type=video&region={self.config.region}"
            f"&page={backend_page}&{MUSIC_FIELDS}"
        )

    def _fetch_trending(self, retries: int) -> List[MusicUnit]:
        return self.executor.execute(self._trending_path(), retries, transform_music_units)

    def _fetch_search(self, query: str, backend_page: int, retries: int) -> List[MusicUnit]:
        return self.executor.execute(
            self._search_path(query, backend_page), retries, transform_music_units
        )

    def get_trending_music(self, page: int, retries: Optional[int] = None) -> List[MusicUnit]:
        """Return one page of trending music.

        The trending list is fetched on first use and kept for the lifetime
        of the fetcher.

        Args:
            page: Zero-based caller page
            retries: Retry budget for the fetch (default: config.trending_retries).
                Pass RetryRequested.remaining when re-invoking after a failure.

        Returns:
            Up to config.page_size MusicUnit objects

        Raises:
            RetryRequested: A mirror failed and the pool was rotated
            FetchFailed: The request failed terminally
            EndOfResults: The page lies past the end of the list
        """
        if retries is None:
            retries = self.config.trending_retries
        with self._lock:
            return self.trending.get_page(page, lambda: self._fetch_trending(retries))

    def search_music(
        self, query: str, page: int, retries: Optional[int] = None
    ) -> List[MusicUnit]:
        """Return one page of search results for query.

        Page 0 always starts a fresh search; later pages continue the
        session of the same query.

        Args:
            query: Search query
            page: Zero-based caller page
            retries: Retry budget for the fetch (default: config.search_retries).
                Pass RetryRequested.remaining when re-invoking after a failure.

        Returns:
            Up to config.page_size MusicUnit objects. A short page is not
            the end of the results.

        Raises:
            RetryRequested: A mirror failed and the pool was rotated
            FetchFailed: The request failed terminally
            EndOfResults: No more results
        """
        if retries is None:
            retries = self.config.search_retries
        with self._lock:
            return self.search.get_page(
                query,
                page,
                lambda q, backend_page: self._fetch_search(q, backend_page, retries),
            )

    def _iter_pages(
        self, get_page: Callable[[int, int], List[MusicUnit]], retries: int
    ) -> Iterator[List[MusicUnit]]:
        page = 0
        while True:
            budget = retries
            while True:
                try:
                    items = get_page(page, budget)
                    break
                except EndOfResults:
                    return
                except RetryRequested as e:
                    # FetchFailed ends the loop once the budget reaches zero
                    budget = e.remaining
                    logger.debug(f"Retrying page {page} on next server ({e.server} failed)")
            yield items
            page += 1

    def iter_trending_music(self, retries: Optional[int] = None) -> Iterator[List[MusicUnit]]:
        """Yield trending pages from page 0 until the end of the results.

        After RetryRequested the same page is re-requested with the
        decremented budget, so a dead network ends in FetchFailed after
        exactly `retries` server rotations.

        Args:
            retries: Retry budget per page (default: config.trending_retries)
        """
        if retries is None:
            retries = self.config.trending_retries
        return self._iter_pages(self.get_trending_music, retries)

    def iter_search_music(
        self, query: str, retries: Optional[int] = None
    ) -> Iterator[List[MusicUnit]]:
        """Yield search pages for query from page 0 until the end of the results.

        Args:
            query: Search query
            retries: Retry budget per page (default: config.search_retries)
        """
        if retries is None:
            retries = self.config.search_retries
        return self._iter_pages(
            lambda page, budget: self.search_music(query, page, budget), retries
        )

    # Async wrappers run the synchronous path in a worker thread

    async def get_trending_music_async(
        self, page: int, retries: Optional[int] = None
    ) -> List[MusicUnit]:
        """Async wrapper for get_trending_music()."""
        return await asyncio.to_thread(self.get_trending_music, page, retries)

    async def search_music_async(
        self, query: str, page: int, retries: Optional[int] = None
    ) -> List[MusicUnit]:
        """Async wrapper for search_music()."""
        return await asyncio.to_thread(self.search_music, query, page, retries)

    def close(self):
        """Close the HTTP client and release resources."""
        self.executor.close()
        logger.info("Closed fetcher")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
