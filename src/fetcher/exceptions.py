"""Exception classes for the mirror fetcher."""

from typing import Optional


class FetcherError(Exception):
    """Base exception for all fetcher errors.

    Attributes:
        message: Human-readable error message
    """

    def __init__(self, message: str):
        """Initialize fetcher error.

        Args:
            message: Human-readable error message
        """
        self.message = message
        super().__init__(message)


class RetryRequested(FetcherError):
    """Transient transport failure with retry budget left.

    The server pool has already been rotated when this is raised, so
    re-invoking the same request targets the next mirror.

    Attributes:
        server: Base URL of the mirror that failed
        remaining: Retry budget to pass to the re-invocation
    """

    def __init__(self, server: str, remaining: int):
        self.server = server
        self.remaining = remaining
        super().__init__(f"Request to {server} failed, retry with budget {remaining}")


class FetchFailed(FetcherError):
    """Terminal failure: retry budget exhausted or undecodable response.

    Attributes:
        url: Full request URL that failed
        reason: Short description of the failure
    """

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Request to {url} failed: {reason}")


class EndOfResults(FetcherError):
    """No items exist for the requested page.

    Not a failure: raised by both the trending and search pagination to
    signal that the caller has paged past the available results.

    Attributes:
        page_index: Caller page that was requested
    """

    def __init__(self, page_index: int, query: Optional[str] = None):
        self.page_index = page_index
        self.query = query
        if query is None:
            message = f"No results for page {page_index}"
        else:
            message = f"No results for page {page_index} of '{query}'"
        super().__init__(message)
