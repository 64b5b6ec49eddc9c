"""FastAPI application for the collection ticker registry."""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from ticker_registry.core.config import settings
from ticker_registry.stores import StorageUnavailableError
import logging
import time
import sys

# Import routers
from ticker_registry.api.routes import health, ticker
from ticker_registry.api.dependencies import build_registry_service
from ticker_registry.scheduler.main import ReservationSweeper

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Ticker Registry API", version="1.0.0")


@app.on_event("startup")
async def startup_event():
    """Build the registry and start the reservation sweep."""
    logger.info("Application starting up...")

    registry = await build_registry_service()
    app.state.registry = registry

    sweeper = ReservationSweeper(registry)
    sweeper.start()
    app.state.sweeper = sweeper

    logger.info("Application startup complete")


@app.on_event("shutdown")
async def shutdown_event():
    """Stop the sweep and release connections."""
    sweeper = getattr(app.state, "sweeper", None)
    if sweeper is not None:
        sweeper.shutdown()

    registry = getattr(app.state, "registry", None)
    if registry is not None and registry.mirror is not None:
        await registry.mirror.close()

    if settings.store_backend == "redis" or (
        settings.store_backend == "sql" and settings.sql_shared_write_lock
    ):
        from ticker_registry.core.redis import close_redis
        await close_redis()

    logger.info("Application shutdown complete")


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all incoming requests and responses."""
    start_time = time.time()

    logger.info(f"→ {request.method} {request.url.path}")
    logger.debug(f"  Query params: {dict(request.query_params)}")

    try:
        response = await call_next(request)
        process_time = time.time() - start_time

        logger.info(f"← {request.method} {request.url.path} - Status: {response.status_code} - Time: {process_time:.3f}s")

        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.error(f"← {request.method} {request.url.path} - ERROR after {process_time:.3f}s: {str(e)}")
        raise


@app.exception_handler(StorageUnavailableError)
async def storage_unavailable_handler(request: Request, exc: StorageUnavailableError):
    """Storage outages are service errors, never "ticker taken"."""
    logger.error(f"Ticker store unavailable during {request.method} {request.url.path}: {exc}")

    return JSONResponse(
        status_code=503,
        content={"detail": "Ticker registry storage unavailable"}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions."""
    logger.error(f"Unhandled exception in {request.method} {request.url.path}")
    logger.error(f"Exception type: {type(exc).__name__}")
    logger.error(f"Exception message: {str(exc)}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error": str(exc) if settings.log_level == "DEBUG" else "Internal server error"
        }
    )

# Configure CORS
logger.info(f"Configuring CORS with origins: {settings.cors_origins_list}")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(health.router)
app.include_router(ticker.router)


@app.get("/")
async def root():
    """Service identification endpoint."""
    return {"status": "ok", "service": "ticker-registry-api"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.backend_port)
