"""Single-request executor with mirror failover signalling."""

import logging
from typing import Any, Callable, Optional, TypeVar

import httpx

from .exceptions import FetchFailed, RetryRequested
from .models import FetcherConfig
from .pool import ServerPool

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RequestExecutor:
    """Issue one GET against the active mirror and classify the outcome.

    The executor never retries on its own. A transport failure with budget
    left rotates the pool and raises RetryRequested; the caller decides
    whether to re-invoke with the decremented budget. Use
    execute_with_retries() for the common re-invoke loop.

    Attributes:
        pool: ServerPool supplying the target mirror
        config: FetcherConfig with timeout and header settings
        client: httpx.Client used for requests
    """

    def __init__(
        self,
        pool: ServerPool,
        config: FetcherConfig,
        client: Optional[httpx.Client] = None,
    ):
        """Initialize the executor.

        Args:
            pool: ServerPool to target and rotate
            config: FetcherConfig with timeout, user agent and gzip settings
            client: Optional preconfigured httpx.Client. When given, the
                executor does not close it.
        """
        self.pool = pool
        self.config = config
        self._owns_client = client is None

        if client is None:
            client = httpx.Client(
                timeout=httpx.Timeout(config.timeout),
                headers={
                    "User-Agent": config.user_agent,
                    "Accept-Encoding": "gzip" if config.gzip else "identity",
                },
                follow_redirects=True,
            )
        self.client = client

    def execute(
        self,
        path_suffix: str,
        max_retries: int,
        parse: Callable[[Any], T],
    ) -> T:
        """Fetch one endpoint from the active mirror.

        Args:
            path_suffix: Path and query appended to the mirror base URL
            max_retries: Remaining retry budget for this call chain
            parse: Maps the decoded JSON body to the result shape; any
                KeyError, TypeError or ValueError counts as a decode failure

        Returns:
            Parsed response value

        Raises:
            RetryRequested: Transport failure with budget left, pool rotated
            FetchFailed: Budget exhausted, or the body could not be decoded
        """
        server = self.pool.current_target()
        url = server + path_suffix

        logger.debug(f"GET {url} (retries left: {max_retries})")
        try:
            response = self.client.get(url, timeout=self.config.timeout)
        except httpx.DecodingError as e:
            logger.warning(f"Undecodable response from {url}: {e}")
            raise FetchFailed(url, f"decoding error: {e}") from e
        except httpx.RequestError as e:
            if max_retries > 0:
                logger.warning(f"Request to {server} failed ({type(e).__name__}), rotating")
                self.pool.rotate()
                raise RetryRequested(server, max_retries - 1) from e
            logger.error(f"Request to {url} failed with no retries left: {e}")
            raise FetchFailed(url, f"transport error: {type(e).__name__}") from e

        try:
            return parse(response.json())
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(
                f"Could not deserialize response from {url} "
                f"(HTTP {response.status_code}): {e}"
            )
            raise FetchFailed(url, f"invalid response body: {e}") from e

    def execute_with_retries(
        self,
        path_suffix: str,
        max_retries: int,
        parse: Callable[[Any], T],
    ) -> T:
        """Call execute(), re-invoking with the decremented budget on RetryRequested.

        With a budget of n and every mirror unreachable this makes n + 1
        attempts and n rotations before FetchFailed propagates.

        Raises:
            FetchFailed: When the budget runs out or a body is undecodable
        """
        budget = max_retries
        while True:
            try:
                return self.execute(path_suffix, budget, parse)
            except RetryRequested as e:
                budget = e.remaining

    def close(self):
        """Close the HTTP client if the executor created it."""
        if self._owns_client:
            self.client.close()
