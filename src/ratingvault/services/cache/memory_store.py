"""In-process implementation of the durable tier port.

Useful for tests and for deployments that do not need persistence across
restarts. Behaves exactly like the SQLite store apart from durability.
"""

from __future__ import annotations

from collections.abc import Iterable


class InMemoryDurableStore:
    """Dictionary-backed DurableStore."""

    def __init__(self) -> None:
        self._rows: dict[str, tuple[bytes, int]] = {}
        self._settings: dict[str, str] = {}

    async def get(self, key: str) -> bytes | None:
        row = self._rows.get(key)
        return row[0] if row else None

    async def put(self, key: str, payload: bytes, stored_at: int) -> None:
        self._rows[key] = (payload, stored_at)

    async def contains(self, key: str) -> bool:
        return key in self._rows

    async def delete(self, keys: Iterable[str]) -> int:
        return sum(1 for key in list(keys) if self._rows.pop(key, None) is not None)

    async def count(self) -> int:
        return len(self._rows)

    async def items(self) -> list[tuple[str, bytes, int]]:
        return [(key, payload, stored_at) for key, (payload, stored_at) in self._rows.items()]

    async def oldest_keys(self, limit: int, exclude: str | None = None) -> list[str]:
        ordered = sorted(
            ((stored_at, key) for key, (_, stored_at) in self._rows.items() if key != exclude),
        )
        return [key for _, key in ordered[:limit]]

    async def delete_stored_before(self, cutoff: int) -> int:
        expired = [key for key, (_, stored_at) in self._rows.items() if stored_at < cutoff]
        return await self.delete(expired)

    async def clear(self) -> int:
        removed = len(self._rows)
        self._rows.clear()
        return removed

    async def size_bytes(self) -> int:
        return sum(len(key) + len(payload) for key, (payload, _) in self._rows.items())

    async def get_setting(self, name: str) -> str | None:
        return self._settings.get(name)

    async def set_setting(self, name: str, value: str) -> None:
        self._settings[name] = value

    async def close(self) -> None:
        return None
