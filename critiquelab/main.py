import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from critiquelab.db.base import Base, engine, get_db
from critiquelab.core.config import settings
from critiquelab.core.logging_config import configure_logging
from critiquelab.core.rate_limit import FixedWindowRateLimiter
from critiquelab.routers import critique as critique_router
from critiquelab.routers import scores as scores_router
from critiquelab.routers import progress as progress_router
from critiquelab.routers import analysis as analysis_router
from critiquelab.routers import critique_history as critique_history_router
from critiquelab.services.gateway import AIGatewayClient
from critiquelab.core.errors import (
    CritiqueLabException,
    critiquelab_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)
from critiquelab import models  # noqa: F401  (register tables on Base.metadata)

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.DATABASE_URL.startswith("sqlite"):
        # Dev/SQLite only; Postgres deployments run Alembic migrations.
        Base.metadata.create_all(bind=engine)

    app.state.rate_limiter = FixedWindowRateLimiter(
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )
    app.state.gateway = AIGatewayClient() if settings.AI_GATEWAY_API_KEY else None
    if app.state.gateway is None:
        logger.warning("AI_GATEWAY_API_KEY is not set; oracle routes will answer 503")

    yield

    if app.state.gateway is not None:
        await app.state.gateway.aclose()


app = FastAPI(
    title="CritiqueLab API",
    description=(
        "**Adversarial critique and argument scoring**\n\n"
        "Forwards submissions to an AI gateway for persona critiques and "
        "0–100 argument scores, keeps a bounded per-client score history, "
        "derives rating, streak, weakness and achievement views from it, "
        "and offers argument autopsy, counterargument coaching and a saved "
        "critique history.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(CritiqueLabException, critiquelab_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(critique_router.router)
app.include_router(scores_router.router)
app.include_router(progress_router.router)
app.include_router(analysis_router.router)
app.include_router(critique_history_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception:
        logger.exception("Health check database query failed")
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {
        "status": "ok",
        "db": "ok",
        "env": settings.APP_ENV,
        "gateway_configured": bool(settings.AI_GATEWAY_API_KEY),
    }
