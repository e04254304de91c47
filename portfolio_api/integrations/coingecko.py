from __future__ import annotations

from typing import Mapping

import httpx

from portfolio_api.errors import ProviderShapeError
from portfolio_api.integrations.http import DEFAULT_USER_AGENT, UpstreamHttpClient
from portfolio_api.schemas.quote import Quote, QuoteSource
from portfolio_api.utils.money import finite_number, round2
from portfolio_api.utils.timefmt import utc_now_iso

SIMPLE_PRICE_URL = "https://api.coingecko.com/api/v3/simple/price"


class CoinGeckoClient(UpstreamHttpClient):
    """Batched crypto quotes from the simple-price endpoint."""

    provider = "coingecko"

    def __init__(
        self,
        *,
        asset_ids: Mapping[str, str],
        base_url: str = SIMPLE_PRICE_URL,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent, transport=transport)
        self.asset_ids = asset_ids
        self.base_url = base_url

    async def fetch_quotes(self, symbols: list[str]) -> dict[str, Quote | None]:
        """Return one entry per requested symbol; None marks a missing price.

        An empty request returns immediately without touching the network.
        """
        wanted = [(s, self.asset_ids[s]) for s in symbols if s in self.asset_ids]
        if not wanted:
            return {}

        ids: list[str] = []
        for _, asset_id in wanted:
            if asset_id not in ids:
                ids.append(asset_id)

        response = await self._get(
            self.base_url,
            params={
                "ids": ",".join(ids),
                "vs_currencies": "usd",
                "include_24hr_change": "true",
            },
        )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderShapeError(self.provider, "invalid json") from exc
        if not isinstance(payload, dict):
            raise ProviderShapeError(self.provider, "price map is not an object")

        now = utc_now_iso()
        out: dict[str, Quote | None] = {}
        for symbol, asset_id in wanted:
            row = payload.get(asset_id)
            if not isinstance(row, dict):
                out[symbol] = None
                continue
            price = finite_number(row.get("usd"))
            if price is None:
                out[symbol] = None
                continue
            change = finite_number(row.get("usd_24h_change"))
            out[symbol] = Quote(
                symbol=symbol,
                price=price,
                change_percent=round2(change) if change is not None else None,
                timestamp=now,
                source=QuoteSource.CRYPTO,
            )
        return out
