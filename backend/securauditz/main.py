import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from securauditz.config import settings
from securauditz.database import check_db_connection, create_tables
from securauditz.errors import AuditzError
from securauditz.routers.audit import router as audit_router
from securauditz.routers.evidence import router as evidence_router
from securauditz.routers.framework import router as framework_router
from securauditz.routers.recommendation import router as recommendation_router
from securauditz.routers.report import router as report_router
from securauditz.services.ai_adapters import build_ai_adapter

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_tables()
    app.state.ai_adapter = build_ai_adapter(settings)
    if app.state.ai_adapter is None:
        logger.warning("AI provider not configured; recommendations will return 503")
    else:
        logger.info("AI provider %s initialised (model %s)", settings.AI_PROVIDER, settings.AI_MODEL)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(AuditzError)
async def auditz_error_handler(request: Request, exc: AuditzError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Store error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": f"Store error: {exc}"})


app.include_router(framework_router)
app.include_router(audit_router)
app.include_router(report_router)
app.include_router(evidence_router)
app.include_router(recommendation_router)

os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
os.makedirs(settings.FRAMEWORK_DOCS_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
app.mount("/framework_docs", StaticFiles(directory=settings.FRAMEWORK_DOCS_DIR), name="framework_docs")


@app.get("/api/health")
async def health():
    """Health check. Verifies API is running and database is reachable."""
    try:
        await check_db_connection()
        db_status = "connected"
    except (SQLAlchemyError, OSError) as exc:
        db_status = f"error: {exc}"

    return {
        "status": "ok" if db_status == "connected" else "degraded",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "database": db_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
