"""
DessertBook FastAPI Application
Main entry point: recipe list and recipe detail backed by TheMealDB
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
from typing import Optional

import httpx

from api.routes import health, meals
from adapters.mealdb_adapter import MealDBAdapter
from services.meal_service import MealService
from services.meals_view_model import MealsViewModel

# Import configuration
from app.config import Settings, settings as default_settings

# Import middleware
from api.middleware import (
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    meal_service_exception_handler,
    general_exception_handler,
)
from app.exceptions import MealServiceError

# Setup logging with configured level and format
logging.basicConfig(
    level=getattr(logging, default_settings.log_level.upper()),
    format=default_settings.log_format,
)
_logger = logging.getLogger("dessertbook.main")


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the application.

    ``transport`` replaces the network transport of the recipe API client,
    which is how the tests serve canned responses.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan context manager for application startup and shutdown.
        Opens the recipe API client and starts the view-model writer.
        """
        _logger.info(f"Starting {settings.app_name} in {settings.environment.value} mode")

        adapter = MealDBAdapter.connect(
            settings.mealdb_base_url,
            timeout=settings.mealdb_timeout,
            transport=transport,
        )
        view_model = MealsViewModel(MealService(adapter), settings.default_category)
        await view_model.start()
        app.state.view_model = view_model

        if settings.load_on_startup:
            view_model.load_meals()

        try:
            yield
        finally:
            _logger.info(f"Shutting down {settings.app_name}")
            await view_model.stop()
            await adapter.close()

    app = FastAPI(
        title=settings.api_title,
        version=settings.app_version,
        description=settings.api_description,
        lifespan=lifespan,
        debug=settings.debug,
        openapi_url=(
            f"{settings.api_prefix}/openapi.json" if not settings.is_production() else None
        ),
        docs_url=f"{settings.api_prefix}/docs" if not settings.is_production() else None,
        redoc_url=f"{settings.api_prefix}/redoc" if not settings.is_production() else None,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    # Add request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(MealServiceError, meal_service_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(meals.router, prefix=settings.api_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.is_development(),
        log_level=default_settings.log_level.lower(),
    )
