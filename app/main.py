"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import httpx
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import router as api_router
from app.core.config import settings
from app.core.cors import setup_cors
from app.core.exceptions import (
    AppError,
    app_exception_handler,
    general_exception_handler,
    http_exception_handler,
)
from app.core.logging import setup_logging
from app.domain.relay import ChatRelay
from app.domain.upstream import build_upstream_targets
from app.utils.logger import get_logger

# 로깅 설정
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the shared upstream client and build the relay for the process."""
    http_client = httpx.AsyncClient(timeout=httpx.Timeout(settings.upstream_timeout))
    targets = build_upstream_targets(settings)
    app.state.http_client = http_client
    app.state.relay = ChatRelay(targets, http_client, tick_interval=settings.stream_tick_seconds)
    logger.info(
        "🚀 Stream relay running on port %d (targets: %s)",
        settings.port,
        ", ".join(t.name for t in targets),
    )
    try:
        yield
    finally:
        await http_client.aclose()
        logger.info("Shutting down...")


# FastAPI 앱 생성
app = FastAPI(
    title="AI Stream Relay",
    description="Typewriter-streaming relay in front of OpenAI-style completion services",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
    # 문서는 DEBUG 모드에서만 노출
    docs_url="/docs" if settings.debug else None,
    redoc_url=None,
    openapi_url="/openapi.json" if settings.debug else None,
)

# CORS 설정
setup_cors(app)

# 예외 핸들러 등록
app.add_exception_handler(AppError, app_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# API 라우터 등록
app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health", tags=["health"])
async def health_check():
    """헬스 체크 엔드포인트"""
    return {
        "status": "ok",
        "time": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
