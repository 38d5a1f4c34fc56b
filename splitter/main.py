"""ASGI application for the split calculation service"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from splitter.api.v1.router import api_router
from splitter.config import Settings, get_settings
from splitter.core.exceptions import AppException
from splitter.core.logging import configure_logging
from splitter.models.payment import PaymentType, SplitMode

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


async def app_exception_handler(request: Request, exc: AppException):
    """Turn library errors into a typed JSON error body"""
    logger.info("%s on %s: %s", exc.error_type, request.url.path, exc.message)
    error = {
        "message": exc.message,
        "type": exc.error_type,
        "path": request.url.path,
    }
    if exc.details is not None:
        error["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content={"error": error})


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception on %s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {"message": "Internal server error", "type": "InternalServerError"}
        },
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use instead of the cached environment settings

    Returns:
        Configured application with the v1 API mounted under `api_prefix`
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        version=VERSION,
        description="Split calculation engine for shared payments",
        debug=settings.debug,
    )

    if settings.allowed_origins:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=[origin.strip() for origin in settings.allowed_origins],
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    application.add_exception_handler(AppException, app_exception_handler)
    application.add_exception_handler(Exception, unhandled_exception_handler)
    application.include_router(api_router, prefix=settings.api_prefix)

    @application.get("/", tags=["Root"])
    async def root():
        """Service metadata and the supported split options"""
        return {
            "message": f"Welcome to {settings.app_name}",
            "docs_url": application.docs_url,
            "version": VERSION,
            "split_modes": [mode.value for mode in SplitMode],
            "payment_types": [payment_type.value for payment_type in PaymentType],
        }

    @application.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "healthy"}

    logger.debug("Application created with API prefix %s", settings.api_prefix)
    return application


app = create_app()
