from __future__ import annotations

from urllib.parse import quote

import httpx

from portfolio_api.errors import ProviderNoPriceError, ProviderShapeError
from portfolio_api.integrations.http import DEFAULT_USER_AGENT, UpstreamHttpClient
from portfolio_api.schemas.quote import Quote, QuoteSource
from portfolio_api.utils.csv_line import parse_csv_line
from portfolio_api.utils.money import parse_number, percent_change
from portfolio_api.utils.timefmt import utc_now_iso

QUOTE_URL = "https://stooq.com/q/l/"
MARKET_SUFFIX = ".us"


def to_stooq_symbol(symbol: str) -> str:
    return f"{symbol.strip().lower()}{MARKET_SUFFIX}"


def parse_quote_csv(symbol: str, text: str) -> Quote:
    """Read close/open from the first data row of a delayed-quote CSV.

    The close is kept at the feed's own precision. The feed carries no
    reliable quote time, so the timestamp is always now.
    """
    lines = text.strip().splitlines()
    if len(lines) < 2:
        raise ProviderShapeError(StooqClient.provider, "empty csv")

    headers = [h.strip().lower() for h in parse_csv_line(lines[0])]
    row = parse_csv_line(lines[1])
    idx = {h: i for i, h in enumerate(headers)}

    def column(name: str) -> str | None:
        i = idx.get(name)
        if i is None or i >= len(row):
            return None
        return row[i]

    close = parse_number(column("close"))
    if close is None:
        raise ProviderNoPriceError(StooqClient.provider, f"no close for {symbol}")

    return Quote(
        symbol=symbol.upper(),
        price=close,
        change_percent=percent_change(close, parse_number(column("open"))),
        timestamp=utc_now_iso(),
        source=QuoteSource.FALLBACK_EQUITY,
    )


class StooqClient(UpstreamHttpClient):
    """Fallback equity quotes from the delayed CSV endpoint."""

    provider = "stooq"

    def __init__(
        self,
        *,
        base_url: str = QUOTE_URL,
        timeout: float = 10.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent, transport=transport)
        self.base_url = base_url

    async def fetch_quote(self, symbol: str) -> Quote:
        # "h" is a bare flag (header row on), so the query is built by hand
        query = f"s={quote(to_stooq_symbol(symbol), safe='')}&f=sd2t2ohlcv&h&e=csv"
        response = await self._get(f"{self.base_url}?{query}")
        return parse_quote_csv(symbol, response.text)
