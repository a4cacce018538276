"""Shared Atrium session with transparent re-authentication."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx
from pydantic import ValidationError

from makerspace_checkin.adapters.atrium_client import AtriumClient
from makerspace_checkin.domain.atrium import (
    AtriumDetailed,
    AtriumResponse,
    AtriumUndetailed,
)
from makerspace_checkin.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)


def parse_atrium_response(payload: object) -> AtriumResponse:
    """Parse a lookup body, trying the detailed shape before the terse one."""
    try:
        return AtriumDetailed.model_validate(payload)
    except ValidationError:
        try:
            return AtriumUndetailed.model_validate(payload)
        except ValidationError as exc:
            raise UpstreamUnavailable(
                f"Unrecognised Atrium response: {payload!r}"
            ) from exc


@dataclass
class AtriumSessionManager:
    """Owns the single process-wide Atrium session.

    Lookups read the current client without locking. Installing a new client
    after a login happens under ``_lock``; the generation counter lets
    concurrent callers that saw the same expired session share one login
    instead of each logging in again.
    """

    client_factory: Callable[[], AtriumClient]
    _client: AtriumClient | None = field(default=None, init=False)
    _generation: int = field(default=0, init=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False)
    _retired: list[AtriumClient] = field(default_factory=list, init=False)

    @property
    def generation(self) -> int:
        """Number of successful logins so far."""
        return self._generation

    async def start(self) -> None:
        """Log in eagerly at process start."""
        await self._refresh(self._generation)

    async def perform(self, lookup_key: str) -> AtriumResponse:
        """Look up a visitor, logging in again and retrying once on expiry."""
        client, generation = await self._current()
        response = await self._search(client, lookup_key)
        if isinstance(response, AtriumUndetailed) and response.is_logged_out:
            logger.warning("Was logged out of Atrium, logging in and trying again")
            client, _ = await self._refresh(generation)
            response = await self._search(client, lookup_key)
            if isinstance(response, AtriumUndetailed) and response.is_logged_out:
                raise UpstreamUnavailable(response.message)
        return response

    async def close(self) -> None:
        """Close the live client and any clients replaced by later logins."""
        clients = [*self._retired]
        if self._client is not None:
            clients.append(self._client)
        self._retired.clear()
        self._client = None
        for client in clients:
            await client.close()

    async def _current(self) -> tuple[AtriumClient, int]:
        client, generation = self._client, self._generation
        if client is None:
            return await self._refresh(generation)
        return client, generation

    async def _refresh(self, seen_generation: int) -> tuple[AtriumClient, int]:
        async with self._lock:
            if self._client is not None and self._generation != seen_generation:
                return self._client, self._generation
            client = self.client_factory()
            try:
                await client.login()
            except httpx.HTTPError as exc:
                await client.close()
                raise UpstreamUnavailable(f"Atrium login failed: {exc}") from exc
            previous = self._client
            self._client = client
            self._generation += 1
            # In-flight lookups may still hold the old client; close it at shutdown.
            if previous is not None:
                self._retired.append(previous)
            logger.info("Logged in to Atrium (login #%s)", self._generation)
            return client, self._generation

    @staticmethod
    async def _search(client: AtriumClient, lookup_key: str) -> AtriumResponse:
        try:
            payload = await client.basic_search(lookup_key)
        except httpx.HTTPStatusError as exc:
            raise UpstreamUnavailable(exc.response.text or str(exc)) from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailable(f"Atrium lookup failed: {exc}") from exc
        except ValueError as exc:
            raise UpstreamUnavailable(
                f"Atrium returned a non-JSON body: {exc}"
            ) from exc
        return parse_atrium_response(payload)
