"""
PayPal Checkout Bridge - Main Application Entry Point

Serves the server-side half of the PayPal checkout: a callable endpoint that
verifies a PayPal order against the expected amount and records it. The
client-side orchestration lives in the ``checkout`` package.
"""

import structlog
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

from api import routes
from api.middleware import log_api_entry
from api.schemas import HealthOut
from core.dependencies import clear_settings, get_settings, init_settings
from core.logging import configure_logging
from core.metrics import init_metrics
from core.settings import Settings
from core.tracing import init_tracer
from db.session import init_db

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application startup and shutdown events."""
    init_settings()
    settings = get_settings()

    init_tracer(settings.OTEL_SERVICE_NAME)
    init_db(settings)
    log.info("app.started", app_name=settings.APP_NAME, environment=settings.ENVIRONMENT)

    yield
    clear_settings()


app = FastAPI(
    title="PayPal Checkout Bridge",
    description="Server-side verification of PayPal orders placed from the mobile checkout.",
    version="1.0.0",
    lifespan=lifespan,
)

FastAPIInstrumentor.instrument_app(app)

init_metrics(app)

app.middleware("http")(log_api_entry)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    log.error("api.unhandled_exception", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc)},
    )


@app.get("/healthz", response_model=HealthOut)
async def health_check(settings: Settings = Depends(get_settings)):
    """Health check endpoint to verify API status."""
    db_type = (
        "PostgreSQL" if settings.DATABASE_URL.startswith("postgresql") else "SQLite"
    )
    return {
        "status": "ok",
        "app_name": settings.APP_NAME,
        "database": db_type,
        "environment": settings.ENVIRONMENT,
    }


API_PREFIX = "/api/v1"

app.include_router(routes.router, prefix=API_PREFIX)


def main():
    configure_logging()
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
