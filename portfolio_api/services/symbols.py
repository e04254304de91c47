from __future__ import annotations

from types import MappingProxyType
from typing import Iterable

CRYPTO_ASSET_IDS = MappingProxyType(
    {
        "BTC": "bitcoin",
        "ETH": "ethereum",
        "SOL": "solana",
        "ADA": "cardano",
        "DOT": "polkadot",
        "LINK": "chainlink",
    }
)


def crypto_asset_id(symbol: str) -> str | None:
    """Return the crypto provider id for a symbol, or None for equities."""
    return CRYPTO_ASSET_IDS.get(symbol.strip().upper())


def is_crypto(symbol: str) -> bool:
    return crypto_asset_id(symbol) is not None


def parse_symbols_param(value: str | Iterable[str] | None) -> list[str]:
    """Split a comma-separated (possibly repeated) query value into symbols."""
    if not value:
        return []
    if not isinstance(value, str):
        value = ",".join(value)
    return [s.strip().upper() for s in value.split(",") if s.strip()]


def unique_symbols(symbols: Iterable[str]) -> list[str]:
    out: list[str] = []
    seen: set[str] = set()
    for symbol in symbols:
        value = str(symbol).strip().upper()
        if not value or value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out


def partition_symbols(symbols: Iterable[str]) -> tuple[list[str], list[str]]:
    """Split symbols into (crypto, equity), preserving input order."""
    crypto: list[str] = []
    equity: list[str] = []
    for symbol in symbols:
        (crypto if is_crypto(symbol) else equity).append(symbol)
    return crypto, equity
