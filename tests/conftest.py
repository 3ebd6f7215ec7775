"""
Pytest configuration and shared fixtures for RatingVault tests.
"""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest
from fakes import (
    FailingDurableStore,
    FakeClock,
    FakeSession,
    SHAWSHANK_PAYLOAD,
    SleepRecorder,
    TEST_API_KEY,
    json_response,
)

from ratingvault.config.models.omdb_settings import OMDbSettings
from ratingvault.core.models import ImdbRating, MetacriticRating, RatingSet, RottenTomatoesRating
from ratingvault.services.cache.memory_store import InMemoryDurableStore
from ratingvault.services.cache.rating_cache import RatingCache
from ratingvault.services.omdb.client import OMDbClient


@pytest.fixture(autouse=True)
def reset_ratingvault_logger() -> Generator[None, None, None]:
    """Undo CLI logger setup so caplog keeps seeing records."""
    yield
    logger = logging.getLogger("ratingvault")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def durable_store() -> InMemoryDurableStore:
    return InMemoryDurableStore()


@pytest.fixture
def failing_store() -> FailingDurableStore:
    return FailingDurableStore()


@pytest.fixture
def rating_cache(durable_store: InMemoryDurableStore, clock: FakeClock) -> RatingCache:
    return RatingCache(durable_store, clock=clock)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def omdb_settings() -> OMDbSettings:
    return OMDbSettings(api_key=TEST_API_KEY)


@pytest.fixture
def shawshank_session() -> FakeSession:
    return FakeSession([json_response(SHAWSHANK_PAYLOAD)])


@pytest.fixture
def make_client(omdb_settings: OMDbSettings, sleep_recorder: SleepRecorder):
    """Build an OMDbClient around a scripted session."""

    def factory(session: FakeSession) -> OMDbClient:
        return OMDbClient(omdb_settings, session=session, sleep=sleep_recorder)  # type: ignore[arg-type]

    return factory


@pytest.fixture
def shawshank_ratings() -> RatingSet:
    return RatingSet(
        imdb=ImdbRating(score=9.3, vote_count=2_900_000),
        metacritic=MetacriticRating(score=82),
        rotten_tomatoes=RottenTomatoesRating(score=89),
    )
