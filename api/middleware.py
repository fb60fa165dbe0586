"""
Consolidated middleware for the HealthyBites API
"""

import time
import logging
from uuid import uuid4

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.exceptions import CatalogError

logger = logging.getLogger("healthybites.middleware")


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all HTTP requests and responses"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid4())
        request.state.request_id = request_id

        logger.info(
            "Request started %s %s",
            request.method,
            request.url.path,
            extra={
                "request_id": request_id,
                "client": request.client.host if request.client else None,
            },
        )

        start_time = time.time()

        try:
            response: Response = await call_next(request)
        except Exception:
            process_time = time.time() - start_time
            logger.error(
                "Request failed %s %s after %.4fs",
                request.method,
                request.url.path,
                process_time,
                extra={"request_id": request_id},
                exc_info=True,
            )
            raise

        process_time = time.time() - start_time
        logger.info(
            "Request completed %s %s -> %d in %.4fs",
            request.method,
            request.url.path,
            response.status_code,
            process_time,
            extra={"request_id": request_id},
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response


# ============================================================================
# Error Handlers
# ============================================================================


def _describe_validation_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    message = error.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors on request bodies and parameters.

    Schema rejections are catalog write failures like any other and share
    their 400 status; the first error becomes the message.
    """
    errors = exc.errors()
    logger.warning(f"Validation error on {request.url}: {errors}")

    message = _describe_validation_error(errors[0]) if errors else "Request validation failed"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": message,
            "code": "VALIDATION_ERROR",
            "details": jsonable_encoder(errors),
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP {exc.status_code} on {request.url}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "code": f"HTTP_{exc.status_code}"},
    )


async def catalog_exception_handler(request: Request, exc: CatalogError):
    """Handle repository and service errors; every kind maps to the same status"""
    logger.warning(f"{type(exc).__name__} on {request.url}: {exc}")

    return JSONResponse(
        status_code=exc.http_status,
        content={"error": exc.message, "code": exc.code},
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "An unexpected error occurred",
            "code": "INTERNAL_SERVER_ERROR",
        },
    )
