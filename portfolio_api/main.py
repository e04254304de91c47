from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from portfolio_api.api.routes import router
from portfolio_api.config.settings import Settings, get_settings
from portfolio_api.integrations.coingecko import CoinGeckoClient
from portfolio_api.integrations.stooq import StooqClient
from portfolio_api.integrations.yahoo_chart import YahooChartClient
from portfolio_api.services.quote_aggregator import QuoteAggregator
from portfolio_api.services.symbols import CRYPTO_ASSET_IDS

logger = logging.getLogger(__name__)


def build_quote_aggregator(settings: Settings) -> QuoteAggregator:
    http_opts = {
        "timeout": settings.UPSTREAM_TIMEOUT_SEC,
        "user_agent": settings.UPSTREAM_USER_AGENT,
    }
    return QuoteAggregator(
        primary=YahooChartClient(**http_opts),
        fallback=StooqClient(**http_opts),
        crypto=CoinGeckoClient(asset_ids=CRYPTO_ASSET_IDS, **http_opts),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.get_settings()
    logger.info(
        "[APP][startup] static_dir=%s static_enabled=%s",
        settings.STATIC_DIR,
        app.state.static_dir is not None,
    )
    yield


def mount_static_bundle(app: FastAPI, static_dir: Path) -> None:
    """Serve the built browser bundle, falling back to index.html for SPA routes."""
    root = static_dir.resolve()
    index = root / "index.html"

    @app.get("/{full_path:path}", include_in_schema=False)
    def spa(full_path: str):
        if full_path == "api" or full_path.startswith("api/"):
            raise HTTPException(status_code=404, detail="Not Found")
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and candidate.is_relative_to(root):
            return FileResponse(candidate)
        if index.is_file():
            return FileResponse(index)
        raise HTTPException(status_code=404, detail="Not Found")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title="Portfolio Quote API", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router, prefix="/api")

    app.state.get_settings = lambda: settings
    app.state.quote_aggregator = build_quote_aggregator(settings)

    static_dir = Path(settings.STATIC_DIR)
    app.state.static_dir = static_dir if static_dir.is_dir() else None
    if app.state.static_dir is not None:
        mount_static_bundle(app, static_dir)
    return app


app = create_app()
