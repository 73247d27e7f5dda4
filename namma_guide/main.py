"""
FastAPI application entry point for the Namma Bengaluru Guide backend.

This module creates the FastAPI app instance, mounts the application shell,
and registers all routers.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from namma_guide.config import settings
from namma_guide.routes.health import router as health_router
from namma_guide.routes.location import router as location_router
from namma_guide.routes.map import router as map_router
from namma_guide.routes.search import router as search_router
from namma_guide.routes.ui import router as ui_router
from namma_guide.schemas.places import GeoPoint
from namma_guide.services import places_service
from namma_guide.services.geolocation import build_geolocation_source
from namma_guide.services.shell import ShellController

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


def _get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: Uses CORS_ALLOWED_ORIGINS (empty means none)
    - anything else: Allows all origins for local dev

    Returns:
        List of allowed origin URLs, or ["*"] for development.
    """
    if settings.is_production():
        origins = settings.CORS_ALLOWED_ORIGINS
        if origins:
            logger.info(f"CORS configured for production with {len(origins)} allowed origins")
        else:
            logger.warning(
                "CORS_ALLOWED_ORIGINS not set in production. "
                "No cross-origin web clients allowed."
            )
        return origins

    logger.info(f"CORS configured for {settings.ENVIRONMENT}: allowing all origins")
    return ["*"]


def build_shell() -> ShellController:
    """Wire the shell to the Gemini places service and the configured geolocation source."""
    return ShellController(
        search_service=places_service.search,
        geolocation_source=build_geolocation_source(settings),
        default_center=GeoPoint(
            latitude=settings.DEFAULT_MAP_LATITUDE,
            longitude=settings.DEFAULT_MAP_LONGITUDE,
        ),
        default_zoom=settings.DEFAULT_MAP_ZOOM,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    shell = build_shell()
    app.state.shell = shell
    # Location lookup starts on mount; the page shows "Locating you..." meanwhile
    shell.mount()
    logger.info("Application shell mounted")
    yield
    await shell.shutdown()
    logger.info("Application shell unmounted")


# Create FastAPI app
app = FastAPI(
    title="Namma Bengaluru Guide API",
    description="Location-aware place recommendations for newcomers to Bangalore",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# Custom validation error handler to log detailed errors
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Log detailed validation errors for debugging.

    This helps diagnose 422 errors from the page scripts.
    """
    logger.error(
        f"Validation error on {request.method} {request.url.path}: {exc.errors()}"
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "details": jsonable_errors(exc),
        }
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors with the non-serializable 'ctx' entries dropped."""
    return [
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ]


# Configure CORS with environment-based origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router)
app.include_router(ui_router)
app.include_router(search_router)
app.include_router(location_router)
app.include_router(map_router)

logger.info("FastAPI app initialized successfully")
