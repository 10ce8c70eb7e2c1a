"""
Main FastAPI application for the Form Builder API.

Form specs are persisted in object storage; answers are rated by an LLM and
filled forms can be exported as PDF.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from form_builder import __version__
from form_builder.api.error_handlers import register_error_handlers
from form_builder.api.middleware.body_size import BodySizeMiddleware
from form_builder.api.middleware.logging import LoggingMiddleware
from form_builder.api.middleware.rate_limit import (
    RateLimitMiddleware,
    RateLimitStore,
    default_policies,
)
from form_builder.api.middleware.request_id import RequestIDMiddleware
from form_builder.api.routers import export_pdf, forms, health, rating
from form_builder.core.config import Settings, get_settings
from form_builder.core.environment import validate_on_startup
from form_builder.core.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    validate_on_startup()
    logger.info(f"Form Builder API {__version__} started")
    yield
    logger.info("Shutting down Form Builder API")


def create_app(
    settings: Optional[Settings] = None,
    rate_limit_store: Optional[RateLimitStore] = None,
) -> FastAPI:
    """Build the application. ``settings`` defaults to the environment."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="Form Builder",
        description="Form specifications, LLM answer rating and PDF export",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Order matters - last added = first executed
    app.add_middleware(BodySizeMiddleware, max_size=settings.max_request_body_size)
    app.add_middleware(
        RateLimitMiddleware,
        policies=default_policies(settings),
        store=rate_limit_store,
        trust_proxy=settings.trust_proxy,
    )
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(export_pdf.router)
    app.include_router(forms.router)
    app.include_router(rating.router)

    return app
