"""Pagination caches for trending and search results.

Both caches are plain state objects owned by a Fetcher. They never talk to
the network directly: on a miss they call the fetch function handed in by
the caller, and whatever that raises propagates unchanged.
"""

import logging
from typing import Callable, List, Optional

from .exceptions import EndOfResults
from .models import MusicUnit

logger = logging.getLogger(__name__)


def _check_page_index(page_index: int):
    if page_index < 0:
        raise ValueError(f"page index must be >= 0, got {page_index}")


def _page_bounds(page_size: int, page_index: int, length: int):
    lower = page_size * page_index
    upper = min(length, lower + page_size)
    return lower, upper


class TrendingCache:
    """Write-once store for the full trending list.

    The backend returns the whole trending set in one response, so the
    first successful fetch is kept for the lifetime of the cache and every
    page is sliced out of it.

    Attributes:
        page_size: Number of items per caller page
        items: Fetched trending list, None until the first successful fetch
    """

    def __init__(self, page_size: int):
        self.page_size = page_size
        self.items: Optional[List[MusicUnit]] = None

    @property
    def is_loaded(self) -> bool:
        return self.items is not None

    def get_page(
        self,
        page_index: int,
        fetch: Callable[[], List[MusicUnit]],
    ) -> List[MusicUnit]:
        """Return one caller page of trending items.

        Args:
            page_index: Zero-based caller page
            fetch: Called once to load the list when nothing is cached yet

        Returns:
            Up to page_size items

        Raises:
            EndOfResults: If the page lies past the end of the list
            ValueError: If page_index is negative
        """
        _check_page_index(page_index)

        if self.items is None:
            # a failed fetch leaves the cache empty so the next call retries
            items = fetch()
            self.items = list(items)
            logger.info(f"Cached {len(self.items)} trending items")

        lower, upper = _page_bounds(self.page_size, page_index, len(self.items))
        if lower >= upper:
            raise EndOfResults(page_index)
        return self.items[lower:upper]


class SearchCache:
    """Single-entry cache reconciling caller pages with backend pages.

    The backend pages by its own cursor and its page size need not match
    the caller's. Items of the last backend batch that a previous caller
    page did not use are carried into the next one before fetching more.

    Attributes:
        page_size: Number of items per caller page
        query: Query of the active search session
        batch: Items of the most recently fetched backend page
        backend_page_cursor: Backend pages requested in this session; the
            next request asks for backend_page_cursor + 1
    """

    def __init__(self, page_size: int):
        self.page_size = page_size
        self.reset()

    def reset(self):
        """Drop the active search session."""
        self.query = ""
        self.batch: List[MusicUnit] = []
        self.backend_page_cursor = 0

    def _start_session(self, query: str):
        logger.debug(f"Starting search session for '{query}'")
        self.reset()
        self.query = query

    def get_page(
        self,
        query: str,
        page_index: int,
        fetch: Callable[[str, int], List[MusicUnit]],
    ) -> List[MusicUnit]:
        """Return one caller page of search results.

        Caller page 0, or any page of a query other than the active one,
        starts a new session with the backend cursor back at the start.

        Args:
            query: Search query
            page_index: Zero-based caller page
            fetch: Called as fetch(query, backend_page) when the carried
                items do not fill the page

        Returns:
            Up to page_size items. A short non-empty page is valid; only
            EndOfResults signals exhaustion.

        Raises:
            EndOfResults: If no carried items remain and the backend
                returned nothing new
            ValueError: If page_index is negative
        """
        _check_page_index(page_index)

        carried: List[MusicUnit] = []
        if query == self.query and page_index > 0:
            lower, upper = _page_bounds(self.page_size, page_index, len(self.batch))
            if upper > lower:
                carried = self.batch[lower:upper]
        else:
            self._start_session(query)

        if len(carried) >= self.page_size:
            logger.debug(f"Serving page {page_index} of '{query}' from cache")
            return carried

        # the cursor stays advanced even if the fetch fails
        self.backend_page_cursor += 1
        batch = fetch(query, self.backend_page_cursor)
        self.batch = list(batch)
        logger.info(
            f"Fetched {len(self.batch)} results for '{query}' "
            f"(backend page {self.backend_page_cursor})"
        )

        carried = carried + self.batch[: self.page_size - len(carried)]
        if not carried:
            raise EndOfResults(page_index, query)
        return carried
