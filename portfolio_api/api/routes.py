import logging

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from portfolio_api.schemas.quote import HealthResponse
from portfolio_api.services.symbols import parse_symbols_param
from portfolio_api.utils.timefmt import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get('/health')
def health():
    return HealthResponse(ok=True, ts=utc_now_iso()).model_dump()


@router.get('/prices')
async def get_prices(request: Request, symbols: list[str] | None = Query(default=None)):
    service = request.app.state.quote_aggregator
    try:
        result = await service.get_quotes(parse_symbols_param(symbols))
    except Exception as exc:
        logger.exception('[API][prices_error] symbols=%s', symbols)
        return JSONResponse(status_code=500, content={'error': str(exc) or type(exc).__name__})

    return {
        'quotes': [q.model_dump(mode='json', by_alias=True, exclude_none=True) for q in result.quotes],
        'ts': result.ts,
    }
