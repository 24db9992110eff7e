"""
Order Orchestrator - Main FastAPI Application.

REST front door for the order event pipeline. The application lifespan
runs the background queue worker.
"""
import asyncio
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import dependencies
from api.routes import health, orders, weather
from core.infrastructure.database import close_database, init_database
from core.infrastructure.logging import configure_logging
from core.settings import AppSettings


logger = logging.getLogger(__name__)

# Extra time on top of the kitchen timeout before the worker task is cancelled
WORKER_STOP_GRACE_SECONDS = 5.0


def worker_stop_timeout(settings: AppSettings) -> float:
    """Long enough for an in-flight kitchen call to finish or time out."""
    return settings.kitchen_api.timeout_seconds + WORKER_STOP_GRACE_SECONDS


# =============================================================================
# LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the queue worker on startup and stop it on shutdown."""
    settings = dependencies.get_settings()
    configure_logging(settings.logging.level)
    logger.info("🚀 Order Orchestrator API starting up...")

    await init_database(settings.database.database_url, echo=settings.database.echo_sql)

    app.state.worker = None
    app.state.worker_task = None
    if settings.worker.enabled:
        worker = dependencies.get_worker()
        app.state.worker = worker
        app.state.worker_task = asyncio.create_task(worker.run(), name="order-event-worker")
    else:
        logger.info("Queue worker disabled (WORKER_ENABLED=false)")

    try:
        yield
    finally:
        logger.info("👋 Order Orchestrator API shutting down...")
        task = app.state.worker_task
        if task is not None:
            app.state.worker.stop()
            try:
                await asyncio.wait_for(task, timeout=worker_stop_timeout(settings))
            except asyncio.TimeoutError:
                logger.warning("Worker did not stop in time, cancelled")
            app.state.worker = None
            app.state.worker_task = None

        await dependencies.get_kitchen_client().close()
        await close_database()
        dependencies.reset_dependencies()


# =============================================================================
# CREATE FASTAPI APP
# =============================================================================

app = FastAPI(
    title="Order Orchestrator API",
    description="""
    Asynchronous order workflow: lemonade, then pizza, then the bill.

    Features:
    - Manual trigger for new orders
    - Background queue worker with bounded retries
    - Manual-review listing for orders that left the workflow
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


# =============================================================================
# REQUEST LOGGING MIDDLEWARE
# =============================================================================

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing."""
    start_time = time.time()

    logger.info(f"→ {request.method} {request.url.path}")

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"← {request.method} {request.url.path} "
        f"[{response.status_code}] ({duration:.3f}s)"
    )

    return response


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    """Map validation-style errors raised by handlers to 400."""
    logger.warning(f"Bad request on {request.url.path}: {exc}")

    return JSONResponse(
        status_code=400,
        content={
            "error": "Bad request",
            "detail": str(exc),
            "path": request.url.path
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "path": request.url.path
        }
    )


# =============================================================================
# INCLUDE ROUTERS
# =============================================================================

app.include_router(
    health.router,
    tags=["Health"]
)

app.include_router(
    orders.router,
    prefix="/api/orders",
    tags=["Orders"]
)

app.include_router(
    weather.router,
    prefix="/api/weather",
    tags=["Weather"]
)


# =============================================================================
# ROOT ENDPOINT
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """API root endpoint."""
    return {
        "message": "Order Orchestrator API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }
