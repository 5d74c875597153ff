"""
Consolidated middleware for the DessertBook API
"""

import time
import logging
from uuid import uuid4

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from api.responses import error_response
from app.exceptions import MealServiceError
from services.meals_view_model import UNAVAILABLE_MESSAGE

logger = logging.getLogger("dessertbook.middleware")


# ============================================================================
# Helper Functions
# ============================================================================


def make_serializable(obj):
    """Convert objects to JSON-serializable format"""
    if isinstance(obj, dict):
        return {k: make_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_serializable(item) for item in obj]
    elif obj is None or isinstance(obj, (str, int, float, bool)):
        return obj
    return str(obj)


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all HTTP requests and responses"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid4())
        request.state.request_id = request_id

        logger.info(
            "Request started",
            extra={
                "request_id": request_id,
                "method": request.method,
                "url": str(request.url),
                "client": request.client.host if request.client else None,
            },
        )

        start_time = time.time()

        try:
            response: Response = await call_next(request)
            process_time = time.time() - start_time

            logger.info(
                "Request completed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "url": str(request.url),
                    "status_code": response.status_code,
                    "process_time": f"{process_time:.4f}s",
                },
            )

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"

            return response

        except Exception as exc:
            process_time = time.time() - start_time
            logger.error(
                "Request failed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "url": str(request.url),
                    "error": str(exc),
                    "process_time": f"{process_time:.4f}s",
                },
                exc_info=True,
            )
            raise


# ============================================================================
# Error Handlers
# ============================================================================


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors"""
    logger.warning(f"Validation error on {request.url}: {exc.errors()}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content=error_response(
            "VALIDATION_ERROR",
            "Request validation failed",
            {"errors": make_serializable(exc.errors())},
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP {exc.status_code} on {request.url}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(f"HTTP_{exc.status_code}", str(exc.detail)),
    )


async def meal_service_exception_handler(request: Request, exc: MealServiceError):
    """Handle recipe fetch failures (network, decode, not found)"""
    logger.warning(
        f"{type(exc).__name__} on {request.url}: {exc.message}"
    )

    return JSONResponse(
        status_code=exc.http_status,
        content=error_response(
            exc.code or type(exc).__name__.upper(),
            UNAVAILABLE_MESSAGE,
            make_serializable(exc.to_dict()),
        ),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {request.url}: {str(exc)}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response("INTERNAL_SERVER_ERROR", "An unexpected error occurred"),
    )
