"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어 및 라우터 등록.

FastAPI application entry point — Middleware, exception handlers and
router registration. The lifespan starts the self-ping task when
SELF_PING_URL is configured and disposes the engine on shutdown.

Run locally:
    python -m store_rating.main
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from store_rating.api import api_router
from store_rating.config import settings
from store_rating.database import engine
from store_rating.middleware.axiom_logging import AxiomLoggingMiddleware
from store_rating.services.health_service import health_service
from store_rating.utils.exceptions import register_exception_handlers

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """앱 시작/종료 훅 — 셀프 핑 태스크 관리 및 엔진 정리."""
    ping_task: asyncio.Task | None = None
    if settings.SELF_PING_URL:
        ping_task = asyncio.create_task(health_service.self_ping_loop(settings.SELF_PING_URL))
    try:
        yield
    finally:
        if ping_task is not None:
            ping_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await ping_task
        await engine.dispose()


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Axiom API 로깅 미들웨어 — CORS보다 먼저 등록하여 모든 요청을 캡처
# (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(api_router, prefix="/api")


if __name__ == "__main__":
    logger.info("Starting %s on port %s", settings.APP_NAME, settings.PORT)
    uvicorn.run("store_rating.main:app", host="0.0.0.0", port=settings.PORT)
