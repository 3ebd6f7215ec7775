"""Tests for deterministic cache key derivation."""

from __future__ import annotations

import pytest

from ratingvault.core.cache_key import derive_cache_key
from ratingvault.core.models import TitleQuery
from ratingvault.shared.constants import MediaType
from ratingvault.shared.errors import RatingVaultError


class TestDeriveCacheKey:
    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert derive_cache_key({"title": "Inception", "year": 2010}) == derive_cache_key(
            {"title": " Inception ", "year": 2010},
        )

    def test_year_changes_the_key(self) -> None:
        assert derive_cache_key({"title": "Inception", "year": 2010}) != derive_cache_key(
            {"title": "Inception"},
        )

    @pytest.mark.parametrize(
        ("payload", "expected"),
        [
            ({"title": "Inception"}, "Inception"),
            ({"title": "Inception", "year": 2010}, "Inception:2010"),
            ({"title": "Breaking Bad", "type": "series"}, "Breaking Bad:series"),
            ({"title": "Dune", "year": "2021", "type": "movie"}, "Dune:2021:movie"),
        ],
    )
    def test_key_layout(self, payload: dict, expected: str) -> None:
        assert derive_cache_key(payload) == expected

    def test_title_query_and_payload_agree(self) -> None:
        query = TitleQuery("Dune", 2021, MediaType.MOVIE)

        assert derive_cache_key(query) == derive_cache_key(
            {"title": "Dune", "year": 2021, "type": "movie"},
        )

    def test_malformed_payload_raises(self) -> None:
        with pytest.raises(RatingVaultError):
            derive_cache_key({"year": 2010})
