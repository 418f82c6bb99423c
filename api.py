"""
Kushfinds FastAPI Application

Main entry point for the Kushfinds marketplace API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Common library imports
from common.database import MongoDB
from common.utils import success_response

# App-specific imports
from app.config import settings
from app.database import ensure_indexes
from app.dependencies import init_all_services, get_email_dispatcher
from app.exception_handlers import register_exception_handlers
from app.middleware import RequestLoggingMiddleware
from app.routers import auth_router, user_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# =============================================================================
# Database Instance
# =============================================================================
main_db = MongoDB()


# =============================================================================
# Application Lifespan
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown tasks like database connections
    and service initialization.
    """
    # Startup
    logger.info("Starting Kushfinds API...")
    settings.validate_required()

    await main_db.connect(
        uri=settings.MONGODB_URI,
        database_name=settings.MONGODB_DATABASE,
    )
    await ensure_indexes(main_db.db)

    init_all_services(
        db=main_db.db,
        client=main_db.client,
        settings=settings,
    )
    logger.info("Kushfinds API started successfully")

    yield

    # Shutdown
    logger.info("Shutting down Kushfinds API...")
    await get_email_dispatcher().drain()
    await main_db.disconnect()
    logger.info("Kushfinds API shut down complete.")


# =============================================================================
# FastAPI Application
# =============================================================================
app = FastAPI(
    title="Kushfinds API",
    description="Marketplace backend: accounts, authentication and profiles",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development() else None,
    redoc_url="/redoc" if settings.is_development() else None,
)

register_exception_handlers(app)

# =============================================================================
# Middleware
# =============================================================================
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# Include Routers (all under /api prefix)
# =============================================================================
app.include_router(auth_router, prefix=settings.API_PREFIX, tags=["Authentication"])
app.include_router(user_router, prefix=settings.API_PREFIX, tags=["User"])


@app.get(f"{settings.API_PREFIX}/ping", tags=["Health"])
async def ping():
    """Liveness probe."""
    return "pong"


# =============================================================================
# Health Check Endpoint
# =============================================================================
@app.get("/health", tags=["Health"])
async def health():
    """
    Health check endpoint.

    Returns the status of the API and database connection.
    """
    return success_response({
        "status": "ok",
        "version": VERSION,
        "database": main_db.is_connected,
    })


# =============================================================================
# Run with Uvicorn
# =============================================================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development(),
    )
