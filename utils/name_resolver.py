"""Best-effort resolution of participant handles to display names."""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, Iterable, Optional, Tuple

import config

logger = logging.getLogger(__name__)


def shorten_handle(handle: str) -> str:
    """
    Shorten a long handle for display.

    Example: 123456789012345678 -> 123456...5678
    """
    if not handle or len(handle) < 10:
        return handle
    return f"{handle[:6]}...{handle[-4:]}"


class NameResolver:
    """Resolves handles through a lookup callable and caches the answers."""

    def __init__(
        self,
        lookup: Callable[[str], Awaitable[Optional[str]]],
        ttl: float = config.NAME_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._lookup = lookup
        self._ttl = ttl
        self._clock = clock
        # handle -> (name, resolved_at)
        self._cache: Dict[str, Tuple[str, float]] = {}

    async def resolve(self, handle: str) -> str:
        """Resolve a handle, falling back to its shortened form."""
        cached = self._cache.get(handle)
        if cached and self._clock() - cached[1] < self._ttl:
            return cached[0]

        name = None
        try:
            name = await self._lookup(handle)
        except Exception as e:
            logger.warning("Name lookup failed for %s: %s", handle, e)

        if not name:
            name = shorten_handle(handle)

        self._cache[handle] = (name, self._clock())
        return name

    async def resolve_many(self, handles: Iterable[str]) -> Dict[str, str]:
        """Resolve several handles concurrently."""
        unique = list(dict.fromkeys(handles))
        names = await asyncio.gather(*(self.resolve(handle) for handle in unique))
        return dict(zip(unique, names))