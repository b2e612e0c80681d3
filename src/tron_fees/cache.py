"""Key/value cache collaborator used for chain parameters."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol


class Cache(Protocol):
    async def get(self, key: str) -> Optional[Any]: ...

    async def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None: ...

    async def delete(self, key: str) -> None: ...


@dataclass
class _Entry:
    value: Any
    expires_at: Optional[float]


@dataclass
class InMemoryCache:
    """Process-local cache with monotonic-clock expiry."""

    clock: Callable[[], float] = time.monotonic
    _entries: dict[str, _Entry] = field(default_factory=dict)

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and self.clock() >= entry.expires_at:
            del self._entries[key]
            return None
        return entry.value

    async def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        if ttl_seconds is not None and ttl_seconds <= 0:
            self._entries.pop(key, None)
            return
        expires_at = None if ttl_seconds is None else self.clock() + ttl_seconds
        self._entries[key] = _Entry(value, expires_at)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
