"""Tests for the shared Atrium session."""

import asyncio

import httpx
import pytest

from makerspace_checkin.domain.atrium import AtriumDetailed, AtriumUndetailed
from makerspace_checkin.errors import UpstreamUnavailable
from makerspace_checkin.services.atrium_session import (
    AtriumSessionManager,
    parse_atrium_response,
)
from tests.conftest import LOGGED_OUT, FakeAtriumUpstream, detailed


def test_parse_prefers_detailed_shape() -> None:
    response = parse_atrium_response(detailed())

    assert isinstance(response, AtriumDetailed)
    assert response.eligibility.eligible


def test_parse_falls_back_to_undetailed_shape() -> None:
    response = parse_atrium_response({"success": False, "message": "No match"})

    assert isinstance(response, AtriumUndetailed)
    assert not response.is_logged_out


def test_parse_rejects_unknown_shape() -> None:
    with pytest.raises(UpstreamUnavailable):
        parse_atrium_response({"unexpected": True})


def test_first_lookup_logs_in_lazily() -> None:
    upstream = FakeAtriumUpstream(responses=[detailed()])
    manager = AtriumSessionManager(upstream.connect)

    response = asyncio.run(manager.perform("G001"))

    assert isinstance(response, AtriumDetailed)
    assert upstream.logins == 1
    assert manager.generation == 1


def test_expired_session_relogs_in_and_retries_once() -> None:
    upstream = FakeAtriumUpstream(responses=[LOGGED_OUT, detailed()])
    manager = AtriumSessionManager(upstream.connect)

    async def scenario() -> object:
        await manager.start()
        return await manager.perform("G001")

    response = asyncio.run(scenario())

    assert isinstance(response, AtriumDetailed)
    assert upstream.logins == 2
    assert upstream.searches == ["G001", "G001"]
    assert len(upstream.clients) == 2


def test_second_expiry_is_surfaced() -> None:
    upstream = FakeAtriumUpstream(responses=[LOGGED_OUT, LOGGED_OUT, detailed()])
    manager = AtriumSessionManager(upstream.connect)

    async def scenario() -> None:
        await manager.start()
        await manager.perform("G001")

    with pytest.raises(UpstreamUnavailable) as excinfo:
        asyncio.run(scenario())

    assert excinfo.value.message == "log_out"
    assert upstream.logins == 2
    assert len(upstream.searches) == 2


def test_other_undetailed_responses_are_returned() -> None:
    upstream = FakeAtriumUpstream(
        responses=[{"success": False, "message": "Card not found"}]
    )
    manager = AtriumSessionManager(upstream.connect)

    response = asyncio.run(manager.perform("nope"))

    assert isinstance(response, AtriumUndetailed)
    assert response.message == "Card not found"
    assert upstream.logins == 1


def test_login_failure_is_surfaced_and_keeps_old_session() -> None:
    upstream = FakeAtriumUpstream(responses=[LOGGED_OUT])
    manager = AtriumSessionManager(upstream.connect)

    async def scenario() -> None:
        await manager.start()
        upstream.login_error = httpx.ConnectError("refused")
        await manager.perform("G001")

    with pytest.raises(UpstreamUnavailable, match="login failed"):
        asyncio.run(scenario())

    assert manager.generation == 1
    assert upstream.clients[1].closed


def test_transport_error_is_surfaced() -> None:
    upstream = FakeAtriumUpstream(responses=[httpx.ReadTimeout("slow")])
    manager = AtriumSessionManager(upstream.connect)

    with pytest.raises(UpstreamUnavailable, match="slow"):
        asyncio.run(manager.perform("G001"))


def test_concurrent_expiries_share_one_login() -> None:
    upstream = FakeAtriumUpstream(
        responses=[LOGGED_OUT, LOGGED_OUT, detailed(), detailed()]
    )
    manager = AtriumSessionManager(upstream.connect)

    async def scenario() -> list[object]:
        await manager.start()
        return await asyncio.gather(manager.perform("a"), manager.perform("b"))

    results = asyncio.run(scenario())

    assert all(isinstance(result, AtriumDetailed) for result in results)
    assert upstream.logins == 2
    assert manager.generation == 2


def test_close_closes_live_and_replaced_clients() -> None:
    upstream = FakeAtriumUpstream(responses=[LOGGED_OUT, detailed()])
    manager = AtriumSessionManager(upstream.connect)

    async def scenario() -> None:
        await manager.start()
        await manager.perform("G001")
        await manager.close()

    asyncio.run(scenario())

    assert [client.closed for client in upstream.clients] == [True, True]
