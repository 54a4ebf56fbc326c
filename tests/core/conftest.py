"""Shared fixtures for fetcher tests."""

import json
from pathlib import Path
from typing import Any, Dict
from unittest.mock import Mock

import httpx
import pytest

from fetcher.models import FetcherConfig


@pytest.fixture
def fixtures() -> Dict[str, Any]:
    """Load mirror API response fixtures from JSON file."""
    fixtures_path = Path(__file__).parent / "fixtures" / "invidious_responses.json"
    with open(fixtures_path, "r") as f:
        return json.load(f)


@pytest.fixture
def config() -> FetcherConfig:
    """Return a FetcherConfig with three test mirrors."""
    return FetcherConfig(
        servers=[
            "https://mirror-a.example/api/v1",
            "https://mirror-b.example/api/v1",
            "https://mirror-c.example/api/v1",
        ],
        region="NP",
        page_size=10,
        timeout=5.0,
    )


@pytest.fixture
def mock_http_client() -> Mock:
    """Return a mocked httpx.Client."""
    return Mock(spec=httpx.Client)
