"""Tests for the in-process cache tier."""

from __future__ import annotations

from ratingvault.services.cache.memory_tier import MemoryTier
from ratingvault.services.cache.models import CacheEntry


def _filled(count: int) -> MemoryTier[str]:
    tier: MemoryTier[str] = MemoryTier()
    for index in range(count):
        tier.set(CacheEntry(key=f"k{index}", value=f"v{index}", stored_at=index))
    return tier


class TestMemoryTier:
    def test_set_get_delete(self) -> None:
        tier = _filled(2)

        assert len(tier) == 2
        assert "k1" in tier
        assert tier.get("k1").value == "v1"
        assert tier.delete("k1") is True
        assert tier.delete("k1") is False
        assert tier.get("k1") is None

    def test_expire_removes_entries_before_cutoff(self) -> None:
        tier = _filled(5)

        removed = tier.expire(3)

        assert removed == 3
        assert sorted(entry.key for entry in tier) == ["k3", "k4"]

    def test_evict_oldest_skips_excluded_key(self) -> None:
        tier = _filled(5)

        evicted = tier.evict_oldest(2, exclude="k0")

        assert evicted == ["k1", "k2"]
        assert "k0" in tier
        assert len(tier) == 3

    def test_discard_many_and_clear(self) -> None:
        tier = _filled(4)

        assert tier.discard_many(["k0", "k1", "missing"]) == 2
        assert tier.clear() == 2
        assert len(tier) == 0
