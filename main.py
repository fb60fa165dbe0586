"""
HealthyBites FastAPI Application
Main entry point: configuration, logging, middleware and the MongoDB lifespan
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
import anyio

from api.routes import health, ingredients, products
from adapters import mongo_adapter
from app.config import settings

from api.middleware import (
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    catalog_exception_handler,
    general_exception_handler,
)
from app.exceptions import CatalogError

# Setup logging with configured level and format
logging.basicConfig(level=getattr(logging, settings.log_level), format=settings.log_format)
_logger = logging.getLogger("healthybites.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for application startup and shutdown.
    Opens the shared MongoDB connection with retries and closes it on shutdown.
    """
    _logger.info(f"Starting HealthyBites in {settings.environment.value} mode")

    for attempt in range(1, settings.db_init_attempts + 1):
        try:
            await mongo_adapter.connect(
                settings.mongo_uri,
                settings.mongo_db_name,
                timeout_ms=settings.mongo_timeout_ms,
            )
            break
        except Exception as exc:
            _logger.warning(
                "MongoDB connection attempt %d/%d failed: %s",
                attempt,
                settings.db_init_attempts,
                exc,
            )
            if attempt < settings.db_init_attempts:
                await anyio.sleep(settings.db_init_delay_sec)
            else:
                _logger.error("MongoDB connection failed after %d attempts", attempt)
                raise

    try:
        yield
    finally:
        _logger.info("Shutting down HealthyBites")
        try:
            await mongo_adapter.close()
        except Exception as e:
            _logger.exception("Error closing MongoDB adapter during shutdown: %s", e)


app = FastAPI(
    title=settings.api_title,
    version=settings.app_version,
    description=settings.api_description,
    lifespan=lifespan,
    debug=settings.debug,
    openapi_url=f"{settings.api_prefix}/openapi.json" if not settings.is_production() else None,
    docs_url=f"{settings.api_prefix}/docs" if not settings.is_production() else None,
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(CatalogError, catalog_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

app.include_router(health.router)
app.include_router(products.router, prefix=settings.api_prefix)
app.include_router(ingredients.router, prefix=settings.api_prefix)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
