"""Builders shared by the fetcher tests."""

from typing import Any, Dict, List

import httpx

from fetcher.models import MusicUnit


def make_units(count: int, prefix: str = "item") -> List[MusicUnit]:
    """Build distinct MusicUnit objects."""
    return [
        MusicUnit(
            name=f"{prefix} {i}",
            artist="Test Artist",
            duration="3:0",
            path=f"https://www.youtube.com/watch?v={prefix}-{i}",
        )
        for i in range(count)
    ]


def make_api_items(count: int, prefix: str = "vid") -> List[Dict[str, Any]]:
    """Build raw API result objects as a mirror returns them."""
    return [
        {
            "title": f"{prefix} title {i}",
            "videoId": f"{prefix}{i:03d}",
            "author": f"{prefix} author",
            "lengthSeconds": 60 + i,
        }
        for i in range(count)
    ]


def json_response(data: Any, status_code: int = 200) -> httpx.Response:
    """Create an httpx.Response with a JSON body."""
    return httpx.Response(status_code, json=data)
