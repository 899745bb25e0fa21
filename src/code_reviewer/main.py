"""
FastAPI application entry point for the Code Review Service.
"""

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from code_reviewer import __version__
from code_reviewer.api.dependencies import get_llm_client, get_settings
from code_reviewer.api.error_handlers import EXCEPTION_HANDLERS
from code_reviewer.api.middleware import RequestTracingMiddleware
from code_reviewer.api.routes import router
from code_reviewer.logging_config import configure_logging

settings = get_settings()

# Configure structured logging before the app starts emitting events
configure_logging(settings.LOG_LEVEL, settings.ENVIRONMENT)
logger = structlog.get_logger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="AI code review backed by Gemini, with retry on model overload",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Request tracing middleware (must be first for request_id in all logs)
app.add_middleware(RequestTracingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

app.include_router(router, tags=["review"])


@app.on_event("startup")
async def startup():
    """Log configuration; a missing API key is a warning, not a failure."""
    logger.info(
        "Application startup",
        version=__version__,
        environment=settings.ENVIRONMENT,
        model=settings.GEMINI_MODEL,
        max_attempts=settings.REVIEW_MAX_ATTEMPTS,
        base_delay_ms=settings.REVIEW_BASE_DELAY_MS,
        max_delay_ms=settings.REVIEW_MAX_DELAY_MS,
    )
    if not settings.GEMINI_API_KEY:
        logger.warning(
            "GEMINI_API_KEY is not set. AI calls will fail until the key is provided."
        )


@app.on_event("shutdown")
async def shutdown():
    """Close the pooled HTTP connections of the Gemini client."""
    await get_llm_client().close()
    logger.info("Application shutdown complete")


if settings.PROMETHEUS_ENABLED:
    Instrumentator().instrument(app).expose(app)


@app.get("/")
async def root():
    """Root endpoint with API documentation links."""
    return {
        "service": settings.APP_NAME,
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
        "review": "/ai/get-review",
        "metrics": "/metrics" if settings.PROMETHEUS_ENABLED else None,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "code_reviewer.main:app",
        host="0.0.0.0",
        port=3000,
        reload=settings.DEBUG,
    )
