"""Atrium campus portal client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class AtriumClient(Protocol):
    """Interface for a cookie-authenticated Atrium session."""

    async def login(self) -> None:
        """Authenticate with operator credentials, storing the session cookie."""

    async def basic_search(self, card_number: str) -> dict[str, object]:
        """Look up a visitor by card or ID number and return raw API data."""

    async def close(self) -> None:
        """Release the underlying HTTP session."""


@dataclass
class HttpxAtriumClient(AtriumClient):
    """HTTPX-backed Atrium client; one instance is one upstream session."""

    base_url: str
    username: str
    password: str
    http_client: httpx.AsyncClient
    timeout: float = 10.0

    @classmethod
    def create(
        cls, base_url: str, username: str, password: str, timeout: float = 10.0
    ) -> "HttpxAtriumClient":
        """Create an Atrium client with a fresh cookie jar that follows redirects."""
        return cls(
            base_url=base_url.rstrip("/"),
            username=username,
            password=password,
            http_client=httpx.AsyncClient(follow_redirects=True),
            timeout=timeout,
        )

    async def login(self) -> None:
        """Post credentials to the login form."""
        url = f"{self.base_url}/do_login"
        response = await self.http_client.post(
            url,
            data={"username": self.username, "password": self.password},
            timeout=self.timeout,
        )
        response.raise_for_status()

    async def basic_search(self, card_number: str) -> dict[str, object]:
        """Run Atrium's basic search for a card number."""
        url = f"{self.base_url}/ajax/basic_search"
        response = await self.http_client.post(
            url,
            data={"card_number": card_number},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
