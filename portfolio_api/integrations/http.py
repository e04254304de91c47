from __future__ import annotations

from typing import Any

import httpx

from portfolio_api.errors import ProviderUnavailableError

DEFAULT_USER_AGENT = "portfolio-tracker/1.0"


class UpstreamHttpClient:
    """Shared GET plumbing for quote providers.

    A fresh ``httpx.AsyncClient`` is opened per call so the provider objects
    hold no connection state and can be shared across event loops.
    """

    provider = "upstream"

    def __init__(
        self,
        *,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            headers={"user-agent": self.user_agent},
            transport=self.transport,
        )

    async def _get(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        try:
            async with self._client() as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise ProviderUnavailableError(self.provider, f"request failed: {exc!r}") from exc

        if not response.is_success:
            raise ProviderUnavailableError(
                self.provider,
                f"http {response.status_code}",
                status_code=response.status_code,
            )
        return response
