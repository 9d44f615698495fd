import logging
import traceback
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stock_engine import __version__
from stock_engine.api.auth import CurrentUser, StaticTokenVerifier, TokenVerifier, require_user
from stock_engine.api.rate_limiter import ClientRateLimiter
from stock_engine.api.stock_service import StockService, normalise_symbol, split_tickers
from stock_engine.cache.store import CacheService, RedisCache, build_cache
from stock_engine.config import Settings
from stock_engine.errors import InternalError, RateLimitError, StockApiError, ValidationError
from stock_engine.synth.random_source import RandomSource
from stock_engine.users.prefs_store import PreferenceStore

SETTINGS = Settings.from_env()

logging.basicConfig(level=SETTINGS.log_level, format="%(asctime)s %(levelname)s %(message)s")
log = logging.getLogger("sd.app")


# ── Dependencies ──────────────────────────────────────────────
def get_service(request: Request) -> StockService:
    return request.app.state.service


def get_prefs(request: Request) -> PreferenceStore:
    return request.app.state.prefs


def _error_body(exc: Exception, message: str, status: str, debug: bool) -> dict:
    body = {"status": status, "message": message}
    if debug:
        cause = exc.__cause__ or exc
        body["stack"] = "".join(traceback.format_exception(type(cause), cause, cause.__traceback__))
    return body


# ── Stock routes ──────────────────────────────────────────────
stocks = APIRouter(prefix="/api/stocks", tags=["Stocks"], dependencies=[Depends(require_user)])


@stocks.get("/data")
async def get_stock_data(
    request: Request,
    tickers: Optional[str] = Query(None, description="Comma-separated symbols e.g. AAPL,TSLA,MSFT"),
    timeframe: Optional[str] = Query(None, description="1D 1W 1M 3M 1Y YTD MTD custom"),
    service: StockService = Depends(get_service),
):
    sym_list = split_tickers(tickers or "")
    if not sym_list:
        raise ValidationError("No stock tickers provided")
    max_tickers = request.app.state.settings.max_tickers
    if len(sym_list) > max_tickers:
        raise ValidationError(f"Maximum {max_tickers} tickers per request")
    try:
        data = await service.get_series_batch(sym_list, timeframe)
    except Exception as e:
        log.error(f"Stock data API error: {e}")
        raise InternalError("Failed to fetch stock data. Please try again later.") from e
    return {"status": "success", "data": data}


@stocks.get("/search")
async def search_stocks(
    query: Optional[str] = Query(None, description="Company name or ticker"),
    service: StockService = Depends(get_service),
):
    if not query:
        raise ValidationError("No search query provided")
    try:
        data = await service.search(query)
    except Exception as e:
        log.error(f"Stock search API error: {e}")
        raise InternalError("Failed to search stocks. Please try again.") from e
    return {"status": "success", "data": data}


@stocks.get("/quote/{symbol}")
async def get_quote(symbol: str, service: StockService = Depends(get_service)):
    if not normalise_symbol(symbol):
        raise ValidationError("No stock symbol provided")
    try:
        data = await service.get_quote(symbol)
    except Exception as e:
        # Degrade to a fresh, uncached quote
        log.error(f"Stock quote API error for {symbol}: {e}")
        data = service.fallback_quote(symbol)
    return {"status": "success", "data": data}


# ── User preference routes ────────────────────────────────────
users = APIRouter(prefix="/api/users", tags=["Users"])


@users.patch("/favorites")
async def update_favorites(
    payload: Dict[str, Any] = Body(default={}),
    user: CurrentUser = Depends(require_user),
    prefs: PreferenceStore = Depends(get_prefs),
):
    favorites = await prefs.set_favorites(user.id, payload.get("favoriteStocks"))
    return {"status": "success", "data": {"favoriteStocks": favorites}}


@users.post("/dashboard-configs", status_code=201)
async def save_dashboard_config(
    payload: Dict[str, Any] = Body(default={}),
    user: CurrentUser = Depends(require_user),
    prefs: PreferenceStore = Depends(get_prefs),
):
    config = await prefs.add_config(
        user.id, payload.get("name"), payload.get("stocks"), payload.get("timeframe"),
    )
    return {"status": "success", "data": {"config": config}}


@users.get("/dashboard-configs")
async def get_dashboard_configs(
    user: CurrentUser = Depends(require_user),
    prefs: PreferenceStore = Depends(get_prefs),
):
    return {"status": "success", "data": {"configs": await prefs.list_configs(user.id)}}


@users.delete("/dashboard-configs/{config_id}")
async def delete_dashboard_config(
    config_id: str,
    user: CurrentUser = Depends(require_user),
    prefs: PreferenceStore = Depends(get_prefs),
):
    await prefs.delete_config(user.id, config_id)
    return {"status": "success", "message": "Dashboard configuration deleted successfully"}


@users.get("/settings")
async def get_user_settings(
    user: CurrentUser = Depends(require_user),
    prefs: PreferenceStore = Depends(get_prefs),
):
    return {"status": "success", "data": {"settings": await prefs.get_settings(user.id)}}


@users.patch("/settings")
async def update_settings(
    payload: Dict[str, Any] = Body(default={}),
    user: CurrentUser = Depends(require_user),
    prefs: PreferenceStore = Depends(get_prefs),
):
    settings = await prefs.update_settings(user.id, payload.get("settings"))
    return {"status": "success", "data": {"settings": settings}}


# ── App factory ───────────────────────────────────────────────
def create_app(
    settings: Optional[Settings] = None,
    cache: Optional[CacheService] = None,
    verifier: Optional[TokenVerifier] = None,
    source: Optional[RandomSource] = None,
) -> FastAPI:
    settings = settings or SETTINGS
    if cache is None:
        cache = build_cache(settings.redis_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if isinstance(cache, RedisCache):
            await cache.connect()
        log.info(f"Using fixed reference date: {settings.reference_date.isoformat()}")
        yield
        await cache.close()

    app = FastAPI(
        title="Stock Dashboard API",
        description="Synthetic, reproducible market data for the dashboard client.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.cache = cache
    app.state.service = StockService(cache, reference_date=settings.reference_date, source=source)
    app.state.prefs = PreferenceStore()
    app.state.verifier = verifier or StaticTokenVerifier(settings.api_tokens)
    app.state.limiter = ClientRateLimiter(settings.rate_limit_max, settings.rate_limit_window)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def rate_limit(request: Request, call_next):
        if request.url.path.startswith("/api"):
            client = request.client.host if request.client else "unknown"
            limiter: ClientRateLimiter = request.app.state.limiter
            if not limiter.allow(client):
                err = RateLimitError()
                retry = int(limiter.get_bucket(client).retry_after()) + 1
                return JSONResponse(err.to_dict(), status_code=err.status_code,
                                    headers={"Retry-After": str(retry)})
        return await call_next(request)

    @app.exception_handler(StockApiError)
    async def handle_api_error(request: Request, exc: StockApiError):
        if exc.status_code >= 500:
            log.error(f"{request.method} {request.url.path} failed: {exc.message}")
            body = _error_body(exc, exc.message, exc.status, settings.is_development)
        else:
            body = exc.to_dict()
        return JSONResponse(body, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return JSONResponse({"status": "fail", "message": message}, status_code=400)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        log.exception(f"Unhandled error on {request.method} {request.url.path}")
        body = _error_body(exc, "Internal server error", "error", settings.is_development)
        return JSONResponse(body, status_code=500)

    @app.get("/")
    async def root():
        return {"status": "ok", "docs": "/docs", "api": "/api/stocks/data?tickers=AAPL&timeframe=1M"}

    @app.get("/health")
    async def health(request: Request):
        return {"status": "ok", "cache": request.app.state.cache.backend}

    app.include_router(stocks)
    app.include_router(users)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=SETTINGS.port, reload=False, log_level="info")
