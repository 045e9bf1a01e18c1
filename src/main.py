"""FastAPI application entry point — read API over reward center records.

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
from sqlalchemy import text

from config.settings import settings
from src.rc_common.database import engine
from src.rc_common.errors import AppError
from src.rc_common.response import error_response
from src.rc_gateway.middleware.request_log import RequestLogMiddleware
from src.rc_listing.api.router import router as listing_router
from src.rc_offer.api.router import router as offer_router
from src.rc_reward_center.api.router import router as reward_center_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify the DB connection. Shutdown: dispose the engine."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc).for_request(request)
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


app.include_router(reward_center_router, prefix="/api/v1")
app.include_router(listing_router, prefix="/api/v1")
app.include_router(offer_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
