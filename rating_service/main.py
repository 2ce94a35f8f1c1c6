"""
Main FastAPI application.
"""
import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from rating_service.api.v1.api import api_router
from rating_service.core.config import settings
from rating_service.core.logging_config import setup_logging
from rating_service.middleware import RequestLoggingMiddleware
from rating_service.models import async_engine

# Initialize logging configuration at startup
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan event handler.

    The schema is managed with Alembic migrations; startup only logs the
    effective configuration and shutdown disposes of the connection pool.
    """
    logger.info(
        f"Starting {settings.APP_NAME} {settings.APP_VERSION} (env={settings.ENV}, "
        f"sample_size={settings.RATING_SAMPLE_SIZE})"
    )

    yield

    await async_engine.dispose()
    logger.info("Application shutting down - database connections closed")


tags_metadata = [
    {
        "name": "health",
        "description": "Health check endpoints for monitoring application status",
    },
    {
        "name": "questions",
        "description": "The active rating questionnaire",
    },
    {
        "name": "answers",
        "description": "Answer submission, user ratings and reviews for movies and shows",
    },
    {
        "name": "subjects",
        "description": "Global grades and counters of rated movies and shows",
    },
]


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
        description=(
            "Users rate movies and shows by answering a fixed questionnaire. "
            "Completing it yields the user's own letter grade and updates the "
            "subject's global grade.\n\n"
            "## Authentication\n\n"
            "Requests are authenticated upstream. The gateway forwards the "
            f"caller's identity in the `{settings.USER_ID_HEADER}` and "
            f"`{settings.USER_NAME_HEADER}` headers."
        ),
        docs_url=f"{settings.API_V1_PREFIX}/docs",
        redoc_url=f"{settings.API_V1_PREFIX}/redoc",
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        openapi_tags=tags_metadata,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            settings.USER_ID_HEADER,
            settings.USER_NAME_HEADER,
        ],
    )

    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ):
        """
        Handle request validation errors.
        """
        errors = [
            {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "")),
                "type": str(error.get("type", "")),
            }
            for error in exc.errors()
        ]

        logger.info(
            f"Validation error on {request.method} {request.url.path}: {errors}"
        )

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": errors},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        """
        Handle unexpected exceptions.

        Generates a unique error_id for each exception so a specific failure
        can be found in the logs. The error_id is included in the response.
        """
        error_id = str(uuid.uuid4())

        logger.exception(
            f"Unhandled exception [error_id={error_id}]: {exc}",
            extra={"error_id": error_id},
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error",
                "error_id": error_id,
            },
        )

    return app


app = create_application()


@app.get("/")
async def root():
    """
    Root endpoint.
    """
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": f"{settings.API_V1_PREFIX}/docs",
    }
