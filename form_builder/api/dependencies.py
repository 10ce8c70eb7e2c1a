"""FastAPI dependency injection for API endpoints.

Services are built from the ``Settings`` the application was created with
(``app.state.settings``) and cached on ``app.state`` for the app's lifetime.
"""

from functools import lru_cache

from fastapi import Depends, Request

from form_builder.core.config import Settings, get_settings, clear_settings_cache
from form_builder.llm.rating_service import RatingService
from form_builder.pdf.renderer import PdfRenderer
from form_builder.storage.form_service import FormService
from form_builder.storage.object_store import ObjectStore


def get_app_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()


def get_object_store(request: Request, settings: Settings = Depends(get_app_settings)) -> ObjectStore:
    """Bucket access for the configured endpoint."""
    state = request.app.state
    if getattr(state, "object_store", None) is None:
        state.object_store = ObjectStore.from_settings(settings)
    return state.object_store


def get_form_service(store: ObjectStore = Depends(get_object_store)) -> FormService:
    return FormService(store)


def get_rating_service(request: Request, settings: Settings = Depends(get_app_settings)) -> RatingService:
    """Rating service backed by the Anthropic provider."""
    state = request.app.state
    if getattr(state, "rating_service", None) is None:
        state.rating_service = RatingService.from_settings(settings)
    return state.rating_service


@lru_cache
def get_pdf_renderer() -> PdfRenderer:
    return PdfRenderer()


def clear_caches() -> None:
    """Clear cached dependencies (for testing)."""
    clear_settings_cache()
    get_pdf_renderer.cache_clear()


__all__ = [
    "Settings",
    "get_app_settings",
    "get_settings",
    "get_object_store",
    "get_form_service",
    "get_rating_service",
    "get_pdf_renderer",
    "clear_caches",
]
