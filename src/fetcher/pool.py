"""Round-robin pool of mirror servers."""

import logging
from typing import List, Sequence

logger = logging.getLogger(__name__)


class ServerPool:
    """Ordered, fixed list of mirror base URLs with an active cursor.

    The active index always points at a valid server. It only moves through
    rotate(), which advances cyclically.

    Example:
        >>> pool = ServerPool(["https://a.example/api/v1", "https://b.example/api/v1"])
        >>> pool.current_target()
        'https://a.example/api/v1'
        >>> pool.rotate()
        'https://b.example/api/v1'
        >>> pool.rotate()
        'https://a.example/api/v1'
    """

    def __init__(self, servers: Sequence[str]):
        """Initialize the pool.

        Args:
            servers: Mirror base URLs

        Raises:
            ValueError: If servers is empty
        """
        if not servers:
            raise ValueError("server pool needs at least one server")
        self._servers: List[str] = list(servers)
        self._active_index = 0

    @property
    def active_index(self) -> int:
        return self._active_index

    @property
    def servers(self) -> List[str]:
        return list(self._servers)

    def __len__(self) -> int:
        return len(self._servers)

    def current_target(self) -> str:
        """Return the base URL of the active server."""
        return self._servers[self._active_index]

    def rotate(self) -> str:
        """Advance to the next server and return its base URL.

        A single-server pool rotates to itself.
        """
        previous = self.current_target()
        self._active_index = (self._active_index + 1) % len(self._servers)
        current = self.current_target()
        logger.warning(f"Switching server from {previous} to {current}")
        return current
