from __future__ import annotations

import asyncio
import logging
import math
from typing import Iterable, Protocol

from portfolio_api.errors import QuoteProviderError
from portfolio_api.schemas.quote import PricesResponse, Quote
from portfolio_api.services.symbols import partition_symbols, unique_symbols
from portfolio_api.utils.timefmt import utc_now_iso

logger = logging.getLogger(__name__)


class EquityQuoteFetcher(Protocol):
    async def fetch_quote(self, symbol: str) -> Quote: ...


class CryptoQuoteFetcher(Protocol):
    async def fetch_quotes(self, symbols: list[str]) -> dict[str, Quote | None]: ...


class QuoteAggregator:
    """Fan-out quote resolver: one crypto batch plus primary->fallback per equity.

    Holds only its provider clients, so a single instance can serve concurrent
    requests.
    """

    def __init__(
        self,
        *,
        primary: EquityQuoteFetcher,
        fallback: EquityQuoteFetcher,
        crypto: CryptoQuoteFetcher,
    ) -> None:
        self.primary = primary
        self.fallback = fallback
        self.crypto = crypto

    async def _resolve_equity(self, symbol: str) -> Quote | None:
        try:
            return await self.primary.fetch_quote(symbol)
        except QuoteProviderError as exc:
            logger.warning(
                "[QUOTE][primary_failed] symbol=%s kind=%s error=%s",
                symbol,
                type(exc).__name__,
                exc,
            )

        try:
            return await self.fallback.fetch_quote(symbol)
        except QuoteProviderError as exc:
            logger.warning(
                "[QUOTE][fallback_failed] symbol=%s kind=%s error=%s",
                symbol,
                type(exc).__name__,
                exc,
            )
            return None

    async def _resolve_crypto(self, symbols: list[str]) -> list[Quote | None]:
        if not symbols:
            return []
        try:
            rows = await self.crypto.fetch_quotes(symbols)
        except QuoteProviderError as exc:
            logger.warning(
                "[QUOTE][crypto_batch_failed] symbols=%s kind=%s error=%s",
                ",".join(symbols),
                type(exc).__name__,
                exc,
            )
            return []
        return [rows.get(symbol) for symbol in symbols]

    async def get_quotes(self, symbols: Iterable[str]) -> PricesResponse:
        requested = unique_symbols(symbols)
        crypto_symbols, equity_symbols = partition_symbols(requested)

        crypto_task = asyncio.create_task(self._resolve_crypto(crypto_symbols))
        equity_tasks = [asyncio.create_task(self._resolve_equity(s)) for s in equity_symbols]
        # join every task before surfacing the first unexpected error
        results = await asyncio.gather(crypto_task, *equity_tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        crypto_rows, *equity_rows = results

        quotes = [
            q
            for q in [*crypto_rows, *equity_rows]
            if q is not None and math.isfinite(q.price)
        ]

        logger.info(
            "[QUOTE][batch_resolve] requested=%d crypto=%d equity=%d final=%d",
            len(requested),
            len(crypto_symbols),
            len(equity_symbols),
            len(quotes),
        )
        return PricesResponse(quotes=quotes, ts=utc_now_iso())
