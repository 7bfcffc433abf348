from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager
import uvicorn
import logging
from dotenv import load_dotenv

# Load environment variables from .env file FIRST, before any other imports
load_dotenv()

from config import settings
from app.core.logging_config import configure_logging

configure_logging()

from app.api.endpoints import health_declarations, system
from app.core.cache import cache_manager
from app.core.error_handling import (
    AppException,
    app_exception_handler,
    validation_exception_handler,
    general_exception_handler,
)
from app.core.monitoring import init_sentry
from app.middleware.rate_limit import RateLimitMiddleware

logger = logging.getLogger(__name__)

API_PREFIX = settings.api_prefix_path


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info(f"{settings.APP_NAME} starting up...")

    if init_sentry():
        logger.info("Sentry monitoring initialized")

    # Shared rate limit counters
    await cache_manager.connect()
    if cache_manager.enabled:
        logger.info("Redis cache connected")

    yield

    await cache_manager.disconnect()
    logger.info(f"{settings.APP_NAME} shutting down...")


app = FastAPI(
    title=settings.APP_NAME,
    description="Health declaration form API",
    version=settings.APP_VERSION,
    lifespan=lifespan,
    docs_url=f"{API_PREFIX}/docs",
    redoc_url=f"{API_PREFIX}/redoc",
    openapi_url=f"{API_PREFIX}/openapi.json",
)

# Rate limiting runs inside CORS so 429 responses still carry CORS headers
app.add_middleware(RateLimitMiddleware, path_prefix=API_PREFIX)

# Compress large list responses
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,  # Cache preflight requests for 1 hour
)

app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.include_router(system.router, prefix=API_PREFIX)
app.include_router(health_declarations.router, prefix=API_PREFIX)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development"
    )
