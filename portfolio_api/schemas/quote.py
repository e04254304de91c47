from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class QuoteSource(str, Enum):
    PRIMARY_EQUITY = "yahoo"
    FALLBACK_EQUITY = "stooq"
    CRYPTO = "coingecko"


class Quote(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    price: float = Field(allow_inf_nan=False)
    change_percent: float | None = Field(default=None, alias="changePercent", allow_inf_nan=False)
    timestamp: str
    source: QuoteSource


class PricesResponse(BaseModel):
    quotes: list[Quote]
    ts: str


class HealthResponse(BaseModel):
    ok: bool
    ts: str
