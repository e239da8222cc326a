"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from ministering.core.config import settings
from ministering.core.structured_logging import build_log_context, configure_logging
from ministering.core.transcription_config import load_transcription_config
from ministering.db.session import engine

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and settings.ENV != "dev":
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,
        send_default_pii=False,  # transcripts never leave the server
    )
    logger.info("Sentry initialized for error tracking")


# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from ministering.core.rate_limit import limiter


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Ministering Companion API",
    description="Record, transcribe and reflect on ministering visits",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
)

# Fails startup on an unknown provider or missing vendor credentials
app.state.transcription_config = load_transcription_config(settings)

app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

# CORS middleware - must be added before routers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,  # Required for cookies
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-Requested-With"],
)


# ============================================================================
# Error Responses: {"message": ..., "error": ...}
# ============================================================================

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        body = exc.detail
    else:
        body = {"message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request", "error": errors},
    )


@app.exception_handler(RateLimitExceeded)
async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"message": "Too many requests", "error": str(exc.detail)},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled error",
        extra=build_log_context(route=request.url.path, method=request.method),
    )
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error", "error": str(exc)},
    )


# ============================================================================
# Routers
# ============================================================================

from ministering.routers import (
    ai_router,
    auth_router,
    content_router,
    entries_router,
    people_router,
    resources_router,
)

app.include_router(auth_router, prefix="/api", tags=["auth"])
app.include_router(people_router, prefix="/api", tags=["people"])
app.include_router(entries_router, prefix="/api", tags=["entries"])
app.include_router(ai_router, prefix="/api", tags=["ai"])
app.include_router(resources_router, prefix="/api", tags=["resources"])
app.include_router(content_router, prefix="/api", tags=["content"])


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health():
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
