# Main application entry point
import asyncio
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import auth_router, health_router, notes_router, notifications_router, users_router
from .config import get_settings
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.realtime import get_connection_manager, relay_notifications
from .core.redis_client import get_redis_client
from .core.seed import seed_database
from .database import AsyncSessionLocal, create_tables, dispose_engine
from .middleware.errors import register_exception_handlers

# Setup logging first
setup_logging()
logger = get_logger("main")

settings = get_settings()


async def _seed() -> None:
    try:
        async with AsyncSessionLocal() as session:
            result = await seed_database(session)
        logger.info("Seeding finished", extra=result)
    except Exception as e:
        logger.error("Seeding failed, continuing without sample data", exc_info=e)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(
        "Starting NoteVault application",
        extra={"version": __version__, "environment": settings.environment, "debug": settings.debug},
    )

    # Redis is optional: without it events reach only this instance's sockets
    redis_client = get_redis_client()
    try:
        await redis_client.connect()
        logger.info("Redis connection established")
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Continuing without Redis...")

    # Allow tests to skip touching the real DB (e.g., when using SQLite in-memory)
    if os.getenv("NOTEVAULT_SKIP_LIFESPAN_DB") == "1":
        logger.info("Skipping DB table creation due to NOTEVAULT_SKIP_LIFESPAN_DB=1")
    else:
        try:
            await create_tables()
            logger.info("Database tables created/verified")
        except Exception as e:
            logger.error("Failed to create database tables", exc_info=e)
            raise

        if settings.seed_database:
            await _seed()

    relay_task = None
    if redis_client.is_connected:
        relay_task = asyncio.create_task(
            relay_notifications(redis_client, get_connection_manager(), settings.notifications_channel)
        )

    yield

    # Shutdown
    logger.info("Shutting down NoteVault application")
    if relay_task is not None:
        relay_task.cancel()
        try:
            await relay_task
        except asyncio.CancelledError:
            pass

    try:
        await redis_client.disconnect()
        logger.info("Redis connection closed")
    except Exception as e:
        logger.warning(f"Redis disconnect failed: {e}")

    await dispose_engine()


app = FastAPI(
    title=settings.app_name,
    description="Notes with password protection and version history",
    version=__version__,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Add logging middleware
app.add_middleware(LoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(notes_router, prefix="/api")
app.include_router(health_router, prefix="/api")
app.include_router(notifications_router)


# Root endpoint
@app.get("/")
async def root():
    return {"message": "NoteVault API"}


# API root endpoint for better navigation
@app.get("/api/")
async def api_root():
    return {
        "message": "NoteVault API",
        "version": __version__,
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "endpoints": {
            "authentication": "/api/auth/",
            "users": "/api/users/me",
            "notes": "/api/notes/",
            "health": "/api/health/",
            "notifications": "/ws/notifications",
        }
    }


# Liveness probe, no dependencies checked
@app.get("/health")
async def basic_health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("src.notevault.main:app", host=settings.host, port=settings.port, reload=settings.reload)
