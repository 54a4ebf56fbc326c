"""Data models for the mirror fetcher."""

import os
from dataclasses import dataclass, field
from typing import List

DEFAULT_SERVERS = [
    "https://invidious.snopyta.org/api/v1",
    "https://vid.puffyan.us/api/v1",
    "https://ytprivate.com/api/v1",
    "https://ytb.trom.tf/api/v1",
    "https://invidious.namazso.eu/api/v1",
    "https://invidious.hub.ne.kr/api/v1",
]

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/92.0.4515.131 Safari/537.36"
)

_TRUTHY = ("1", "true", "yes", "on")


@dataclass
class FetcherConfig:
    """Configuration for talking to a pool of mirrored API servers.

    Attributes:
        servers: Mirror base URLs, tried in order and rotated on failure
        region: Region code sent with trending and search requests
        page_size: Number of items in one caller page
        timeout: Per-request timeout in seconds
        user_agent: User-Agent header sent with every request
        gzip: Negotiate gzip-compressed responses
        trending_retries: Retry budget for the trending request
        search_retries: Retry budget for each search request
    """

    servers: List[str] = field(default_factory=lambda: list(DEFAULT_SERVERS))
    region: str = "NP"
    page_size: int = 10
    timeout: float = 5.0
    user_agent: str = DEFAULT_USER_AGENT
    gzip: bool = True
    trending_retries: int = 2
    search_retries: int = 1

    def __post_init__(self):
        """Validate configuration on initialization."""
        if not self.servers:
            raise ValueError("at least one server is required")
        for server in self.servers:
            if not server or not server.startswith(("http://", "https://")):
                raise ValueError(f"server must be a valid HTTP/HTTPS URL: {server!r}")
        self.servers = [server.rstrip("/") for server in self.servers]
        if not self.region:
            raise ValueError("region is required")
        if self.page_size <= 0:
            raise ValueError("page_size must be > 0")
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if self.trending_retries < 0 or self.search_retries < 0:
            raise ValueError("retry budgets must be >= 0")

    @classmethod
    def from_environment(cls) -> "FetcherConfig":
        """Load configuration from environment variables.

        Every variable is optional; unset variables keep the defaults.

        Returns:
            FetcherConfig: Loaded configuration object

        Raises:
            EnvironmentError: If a numeric variable cannot be parsed
            ValueError: If the resulting configuration is invalid
        """
        kwargs = {}

        servers = os.getenv("FETCHER_SERVERS")
        if servers:
            kwargs["servers"] = [s.strip() for s in servers.split(",") if s.strip()]

        for var, key in (("FETCHER_REGION", "region"), ("FETCHER_USER_AGENT", "user_agent")):
            value = os.getenv(var)
            if value:
                kwargs[key] = value

        numeric = {
            "FETCHER_PAGE_SIZE": ("page_size", int),
            "FETCHER_TIMEOUT": ("timeout", float),
            "FETCHER_TRENDING_RETRIES": ("trending_retries", int),
            "FETCHER_SEARCH_RETRIES": ("search_retries", int),
        }
        for var, (key, convert) in numeric.items():
            value = os.getenv(var)
            if value is None or value == "":
                continue
            try:
                kwargs[key] = convert(value)
            except ValueError:
                raise EnvironmentError(f"Invalid value for {var}: {value!r}") from None

        gzip = os.getenv("FETCHER_GZIP")
        if gzip:
            kwargs["gzip"] = gzip.strip().lower() in _TRUTHY

        return cls(**kwargs)


@dataclass
class MusicUnit:
    """One playable result item.

    Items compare equal when their paths match.

    Attributes:
        name: Track title
        artist: Uploader / artist name
        duration: Display duration in "minutes:seconds" form
        path: Watch URL for the video, stable identity of the item
        liked: Client-side flag, never set by the API
    """

    name: str = field(compare=False)
    artist: str = field(compare=False)
    duration: str = field(compare=False)
    path: str
    liked: bool = field(default=False, compare=False)
