from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from portfolio_api.errors import ProviderNoPriceError, ProviderShapeError
from portfolio_api.integrations.http import DEFAULT_USER_AGENT, UpstreamHttpClient
from portfolio_api.schemas.quote import Quote, QuoteSource
from portfolio_api.utils.money import finite_number, percent_change, round2
from portfolio_api.utils.timefmt import epoch_to_iso, utc_now_iso

CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart"


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _latest_close(timestamps: list, closes: list) -> tuple[float | None, Any]:
    for i in range(len(closes) - 1, -1, -1):
        value = finite_number(closes[i])
        if value is not None:
            ts = timestamps[i] if i < len(timestamps) else None
            return value, ts
    return None, None


def parse_chart_payload(symbol: str, payload: Any) -> Quote:
    """Build a quote from an intraday chart payload.

    The most recent finite close wins; ``meta.regularMarketPrice`` is used
    when every close is missing.
    """
    try:
        result = payload["chart"]["result"][0]
    except (KeyError, IndexError, TypeError) as exc:
        raise ProviderShapeError(YahooChartClient.provider, "missing chart.result[0]") from exc
    if not isinstance(result, dict):
        raise ProviderShapeError(YahooChartClient.provider, "chart.result[0] is not an object")

    meta = _as_dict(result.get("meta"))
    timestamps = _as_list(result.get("timestamp"))
    quote_blocks = _as_list(_as_dict(result.get("indicators")).get("quote"))
    closes = _as_list(_as_dict(quote_blocks[0]).get("close")) if quote_blocks else []

    last_close, last_ts = _latest_close(timestamps, closes)
    price = last_close if last_close is not None else finite_number(meta.get("regularMarketPrice"))
    if price is None:
        raise ProviderNoPriceError(YahooChartClient.provider, f"no price for {symbol}")

    change = percent_change(price, finite_number(meta.get("previousClose")))
    timestamp = epoch_to_iso(last_ts) if last_close is not None else None

    return Quote(
        symbol=symbol.upper(),
        price=round2(price),
        change_percent=change,
        timestamp=timestamp or utc_now_iso(),
        source=QuoteSource.PRIMARY_EQUITY,
    )


class YahooChartClient(UpstreamHttpClient):
    """Primary equity quotes from the intraday chart endpoint."""

    provider = "yahoo"

    def __init__(
        self,
        *,
        base_url: str = CHART_URL,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent, transport=transport)
        self.base_url = base_url.rstrip("/")

    async def fetch_quote(self, symbol: str) -> Quote:
        symbol = symbol.upper()
        response = await self._get(
            f"{self.base_url}/{quote(symbol, safe='')}",
            params={"interval": "5m", "range": "1d", "includePrePost": "true"},
        )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderShapeError(self.provider, "invalid json") from exc
        return parse_chart_payload(symbol, payload)
