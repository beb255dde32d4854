"""Hoc Nhac API - FastAPI application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlalchemy import text

from hocnhac.api.v1.api import api_router
from hocnhac.core.config import settings
from hocnhac.core.errors import AppError, NotFoundError, StoreErrorKind, TransientStoreError, ValidationError

logger = logging.getLogger("hocnhac")


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    from hocnhac.db.session import engine
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("[Backend] Database: OK")
    except Exception as e:
        logger.warning("[Backend] Database connection failed: %s", e)
    logger.info("[Backend] API: /api/v1 | Docs: /docs | Health: /health | Ready (DB): /ready")
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(api_router, prefix="/api")


def _status_for(error: AppError) -> int:
    if isinstance(error, ValidationError):
        return 422
    if isinstance(error, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, TransientStoreError) and error.store_kind is StoreErrorKind.PERMISSION_DENIED:
        return status.HTTP_403_FORBIDDEN
    return status.HTTP_503_SERVICE_UNAVAILABLE


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if isinstance(exc, TransientStoreError):
        logger.error("Store error on %s %s: %s (%s)", request.method, request.url.path, exc.detail, exc.kind)
    return JSONResponse(status_code=_status_for(exc), content={"detail": exc.detail, "kind": exc.kind})


@app.get("/")
async def root():
    return {
        "name": settings.APP_NAME,
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "api": "/api/v1",
    }


@app.get("/favicon.ico", include_in_schema=False)
async def favicon():
    return Response(status_code=204)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/ready")
async def ready():
    """Health check including DB - use to verify backend is fully operational."""
    from hocnhac.db.session import engine
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return {"status": "ok", "database": "connected"}
    except Exception as e:
        return JSONResponse(
            status_code=503,
            content={"status": "error", "database": str(e)},
        )
