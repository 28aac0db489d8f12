"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.sf_admin.api.router import router as admin_router
from src.sf_common.database import create_database
from src.sf_common.errors import AppError
from src.sf_common.redis_client import close_redis
from src.sf_common.response import error_response
from src.sf_gateway.middleware.rate_limit import RateLimitMiddleware
from src.sf_gateway.middleware.request_log import RequestLogMiddleware
from src.sf_order.api.router import router as order_router
from src.sf_pricing.api.router import router as pricing_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: open the database handle. Shutdown: close DB and Redis pools."""
    database = create_database()
    await database.open()
    app.state.database = database
    try:
        yield
    finally:
        await database.close()
        await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# Starlette runs the last-added middleware first: request ids are assigned
# before the rate limiter can reject a request.
app.add_middleware(RateLimitMiddleware)
app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.warning(
            "%s %s failed: [%d] %s", request.method, request.url.path, exc.code, exc.message
        )
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(pricing_router, prefix="/api/v1")
app.include_router(order_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
