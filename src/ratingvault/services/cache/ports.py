"""Durable tier port.

The cache store talks to persistent storage only through this protocol.
Payloads are opaque bytes; the store also keeps each entry's write time so
that eviction and expiry can be answered without decoding payloads.

Implementations raise ``StorageDegradedError`` when the backing storage is
unreachable. The cache store absorbs those errors.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable


@runtime_checkable
class DurableStore(Protocol):
    """Namespaced key-value store surviving process restarts."""

    async def get(self, key: str) -> bytes | None:
        """Return the payload for key, or None."""
        ...

    async def put(self, key: str, payload: bytes, stored_at: int) -> None:
        """Insert or replace an entry."""
        ...

    async def contains(self, key: str) -> bool:
        ...

    async def delete(self, keys: Iterable[str]) -> int:
        """Delete keys, returning how many existed."""
        ...

    async def count(self) -> int:
        ...

    async def items(self) -> list[tuple[str, bytes, int]]:
        """Return ``(key, payload, stored_at)`` for every entry."""
        ...

    async def oldest_keys(self, limit: int, exclude: str | None = None) -> list[str]:
        """Return up to limit keys ordered by stored_at ascending."""
        ...

    async def delete_stored_before(self, cutoff: int) -> int:
        """Delete entries with stored_at < cutoff, returning the count."""
        ...

    async def clear(self) -> int:
        """Delete every entry, returning the count."""
        ...

    async def size_bytes(self) -> int:
        """Approximate storage footprint of all entries."""
        ...

    async def get_setting(self, name: str) -> str | None:
        ...

    async def set_setting(self, name: str, value: str) -> None:
        ...

    async def close(self) -> None:
        ...
