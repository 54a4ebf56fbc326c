"""Resilient client for mirrored music metadata APIs."""

__version__ = "1.0.0"

from .cache import SearchCache, TrendingCache
from .client import Fetcher
from .exceptions import EndOfResults, FetchFailed, FetcherError, RetryRequested
from .executor import RequestExecutor
from .logger import setup_logging
from .models import DEFAULT_SERVERS, FetcherConfig, MusicUnit
from .pool import ServerPool
from .transform import (
    format_duration,
    parse_duration,
    transform_music_unit,
    transform_music_units,
    watch_url,
)

__all__ = [
    # Client
    "Fetcher",
    "RequestExecutor",
    "ServerPool",
    # Caches
    "TrendingCache",
    "SearchCache",
    # Models
    "FetcherConfig",
    "MusicUnit",
    "DEFAULT_SERVERS",
    # Transformation
    "format_duration",
    "parse_duration",
    "transform_music_unit",
    "transform_music_units",
    "watch_url",
    # Logging
    "setup_logging",
    # Exceptions
    "FetcherError",
    "RetryRequested",
    "FetchFailed",
    "EndOfResults",
]
