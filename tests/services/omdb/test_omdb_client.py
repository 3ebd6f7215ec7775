"""Tests for the OMDb fetch client."""

from __future__ import annotations

import asyncio
import logging

import aiohttp
import pytest
from fakes import (
    NOT_FOUND_PAYLOAD,
    SHAWSHANK_PAYLOAD,
    TEST_API_KEY,
    FakeResponse,
    FakeSession,
    SleepRecorder,
    json_response,
)

from ratingvault.core.models import RatingSet, TitleQuery
from ratingvault.services.omdb.client import OMDbClient, classify_upstream_error
from ratingvault.shared.constants import MediaType, OMDbConfig
from ratingvault.shared.errors import (
    ErrorCode,
    FailureReason,
    InvalidCredentialsError,
    InvalidQueryError,
    NotFoundError,
    TransientUpstreamFailureError,
    UpstreamRejectedError,
)

INVALID_KEY_PAYLOAD = {"Response": "False", "Error": "Invalid API key!"}


class TestBuildTitleParams:
    def test_title_only(self, make_client) -> None:
        client = make_client(FakeSession([json_response(SHAWSHANK_PAYLOAD)]))

        params = client.build_title_params(TitleQuery(" Inception "))

        assert params == {
            OMDbConfig.PARAM_API_KEY: TEST_API_KEY,
            OMDbConfig.PARAM_TITLE: "Inception",
            OMDbConfig.PARAM_PLOT: "short",
        }

    def test_optional_filters(self, make_client) -> None:
        client = make_client(FakeSession([json_response(SHAWSHANK_PAYLOAD)]))

        params = client.build_title_params(TitleQuery("Dark", 2017, MediaType.SERIES))

        assert params[OMDbConfig.PARAM_YEAR] == "2017"
        assert params[OMDbConfig.PARAM_TYPE] == "series"

    def test_same_query_same_params(self, make_client) -> None:
        client = make_client(FakeSession([json_response(SHAWSHANK_PAYLOAD)]))
        query = TitleQuery("Heat", 1995)

        assert client.build_title_params(query) == client.build_title_params(query)


class TestFetch:
    @pytest.mark.asyncio
    async def test_success(
        self,
        make_client,
        shawshank_session: FakeSession,
        shawshank_ratings: RatingSet,
    ) -> None:
        client = make_client(shawshank_session)

        ratings = await client.fetch({"title": "The Shawshank Redemption", "year": 1994})

        assert ratings == shawshank_ratings
        assert len(shawshank_session.calls) == 1
        call = shawshank_session.calls[0]
        assert call["url"] == OMDbConfig.BASE_URL
        assert call["params"]["t"] == "The Shawshank Redemption"
        assert call["params"]["y"] == "1994"

    @pytest.mark.parametrize("title", ["", "   "])
    @pytest.mark.asyncio
    async def test_empty_title_makes_no_request(
        self,
        make_client,
        shawshank_session: FakeSession,
        title: str,
    ) -> None:
        client = make_client(shawshank_session)

        with pytest.raises(InvalidQueryError) as exc_info:
            await client.fetch(TitleQuery(title))

        assert exc_info.value.reason is FailureReason.INVALID_QUERY
        assert shawshank_session.calls == []

    @pytest.mark.asyncio
    async def test_not_found(self, make_client) -> None:
        session = FakeSession([json_response(NOT_FOUND_PAYLOAD)])
        client = make_client(session)

        with pytest.raises(NotFoundError) as exc_info:
            await client.fetch(TitleQuery("Zzzzqqq Nonexistent Title"))

        assert exc_info.value.message == "Movie not found!"
        assert len(session.calls) == 1

    @pytest.mark.asyncio
    async def test_invalid_key(self, make_client) -> None:
        session = FakeSession([json_response(INVALID_KEY_PAYLOAD)])

        with pytest.raises(InvalidCredentialsError):
            await make_client(session).fetch(TitleQuery("Heat"))

    @pytest.mark.asyncio
    async def test_unauthorized_rejection_is_not_retried(
        self,
        make_client,
        sleep_recorder: SleepRecorder,
    ) -> None:
        session = FakeSession([json_response(INVALID_KEY_PAYLOAD, 401, "Unauthorized")])

        with pytest.raises(InvalidCredentialsError):
            await make_client(session).fetch(TitleQuery("Heat"))

        assert len(session.calls) == 1
        assert sleep_recorder.delays == []

    @pytest.mark.asyncio
    async def test_other_rejection(self, make_client) -> None:
        session = FakeSession([json_response({"Response": "False", "Error": "Too many results."})])

        with pytest.raises(UpstreamRejectedError) as exc_info:
            await make_client(session).fetch(TitleQuery("a"))

        assert exc_info.value.reason is FailureReason.UPSTREAM_REJECTED

    @pytest.mark.asyncio
    async def test_server_errors_are_retried_then_reported(
        self,
        make_client,
        sleep_recorder: SleepRecorder,
    ) -> None:
        # Given: upstream answers 500 every time
        session = FakeSession([FakeResponse(500, b"oops", "Internal Server Error")])

        # When
        with pytest.raises(TransientUpstreamFailureError) as exc_info:
            await make_client(session).fetch(TitleQuery("Heat"))

        # Then
        assert len(session.calls) == 3
        assert sleep_recorder.delays == [1.0, 2.0]
        assert exc_info.value.message.startswith("Failed to fetch after 3 attempts")

    @pytest.mark.asyncio
    async def test_transport_errors_then_success(
        self,
        make_client,
        shawshank_ratings: RatingSet,
    ) -> None:
        session = FakeSession(
            [
                asyncio.TimeoutError(),
                aiohttp.ClientConnectionError("connection reset"),
                json_response(SHAWSHANK_PAYLOAD),
            ],
        )

        ratings = await make_client(session).fetch(TitleQuery("The Shawshank Redemption"))

        assert ratings == shawshank_ratings
        assert len(session.calls) == 3

    @pytest.mark.parametrize("body", [b"<html>maintenance</html>", b"[]", b"null"])
    @pytest.mark.asyncio
    async def test_non_object_body_is_rejected(self, make_client, body: bytes) -> None:
        session = FakeSession([FakeResponse(200, body)])

        with pytest.raises(UpstreamRejectedError) as exc_info:
            await make_client(session).fetch(TitleQuery("Heat"))

        assert exc_info.value.code == ErrorCode.OMDB_API_INVALID_RESPONSE
        assert len(session.calls) == 1

    @pytest.mark.asyncio
    async def test_api_key_never_logged(
        self,
        make_client,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        session = FakeSession([FakeResponse(503, b"", "Service Unavailable")])

        with caplog.at_level(logging.DEBUG, logger="ratingvault"):
            with pytest.raises(TransientUpstreamFailureError):
                await make_client(session).fetch(TitleQuery("Heat"))

        assert caplog.records
        assert TEST_API_KEY not in caplog.text


class TestFetchByImdbId:
    @pytest.mark.asyncio
    async def test_success(self, make_client, shawshank_session: FakeSession) -> None:
        await make_client(shawshank_session).fetch_by_imdb_id("tt0111161")

        assert shawshank_session.calls[0]["params"]["i"] == "tt0111161"

    @pytest.mark.parametrize("imdb_id", ["0111161", "", "nm0000001"])
    @pytest.mark.asyncio
    async def test_invalid_id(self, make_client, shawshank_session: FakeSession, imdb_id: str) -> None:
        with pytest.raises(InvalidQueryError):
            await make_client(shawshank_session).fetch_by_imdb_id(imdb_id)

        assert shawshank_session.calls == []


class TestSearch:
    @pytest.mark.asyncio
    async def test_results(self, make_client) -> None:
        session = FakeSession(
            [
                json_response(
                    {
                        "Search": [
                            {
                                "Title": "Heat",
                                "Year": "1995",
                                "imdbID": "tt0113277",
                                "Type": "movie",
                                "Poster": "N/A",
                            },
                        ],
                        "totalResults": "1",
                        "Response": "True",
                    },
                ),
            ],
        )

        page = await make_client(session).search("Heat", media_type="Movie", page=1)

        assert page.total_results == 1
        assert page.results[0].imdb_id == "tt0113277"
        assert page.results[0].poster is None
        assert session.calls[0]["params"]["s"] == "Heat"
        assert session.calls[0]["params"]["type"] == "movie"
        assert page.to_dict()["results"][0]["type"] == "movie"

    @pytest.mark.asyncio
    async def test_no_match_gives_empty_page(self, make_client) -> None:
        session = FakeSession([json_response(NOT_FOUND_PAYLOAD)])

        page = await make_client(session).search("Zzzzqqq")

        assert page.is_empty
        assert page.error == "Movie not found!"
        assert page.to_dict()["error"] == "Movie not found!"

    @pytest.mark.asyncio
    async def test_invalid_key_is_raised(self, make_client) -> None:
        session = FakeSession([json_response(INVALID_KEY_PAYLOAD)])

        with pytest.raises(InvalidCredentialsError):
            await make_client(session).search("Heat")

    @pytest.mark.asyncio
    async def test_empty_title(self, make_client, shawshank_session: FakeSession) -> None:
        with pytest.raises(InvalidQueryError):
            await make_client(shawshank_session).search("  ")


class TestSessionOwnership:
    @pytest.mark.asyncio
    async def test_injected_session_is_not_closed(self, make_client, shawshank_session: FakeSession) -> None:
        async with make_client(shawshank_session) as client:
            await client.fetch(TitleQuery("The Shawshank Redemption"))

        assert shawshank_session.closed is False

    @pytest.mark.asyncio
    async def test_owned_session_is_created_and_closed(self, omdb_settings) -> None:
        client = OMDbClient(omdb_settings)

        session = await client._get_session()
        assert await client._get_session() is session

        await client.close()
        assert session.closed


class TestClassifyUpstreamError:
    @pytest.mark.parametrize(
        ("message", "expected"),
        [
            ("Movie not found!", NotFoundError),
            ("Series not found!", NotFoundError),
            ("Invalid API key!", InvalidCredentialsError),
            ("No API key provided.", InvalidCredentialsError),
            ("Request limit reached!", UpstreamRejectedError),
        ],
    )
    def test_classification(self, message: str, expected: type) -> None:
        error = classify_upstream_error(message, "fetch", "Heat")

        assert type(error) is expected
        assert error.message == message
