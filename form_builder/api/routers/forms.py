"""Form persistence endpoints under ``/api/form``.

Storage failures are answered with 500 and the error text; they are not
routed through the global handlers.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import JSONResponse

from form_builder.api.dependencies import get_form_service
from form_builder.domain.slug import slugify
from form_builder.storage.form_service import FormService

router = APIRouter(prefix="/api/form", tags=["forms"])
logger = logging.getLogger(__name__)


def _failure(e: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"ok": False, "error": str(e)})


def _form_id(spec: Any) -> str:
    name = spec.get("name") if isinstance(spec, dict) else None
    form_id = slugify(name) if isinstance(name, str) else ""
    if not form_id:
        raise ValueError("Invalid form name")
    return form_id


@router.post("/save/")
def save_form(payload: Any = Body(None), service: FormService = Depends(get_form_service)):
    """Persist a spec sent raw or as ``{spec}``; the id is the slug of its name."""
    spec = payload
    if isinstance(payload, dict) and "spec" in payload:
        spec = payload["spec"]
    try:
        form_id = _form_id(spec)
        service.save_form(form_id, spec)
    except Exception as e:
        logger.error(f"Failed to save form: {e}", exc_info=True)
        return _failure(e)
    return {"ok": True}


@router.get("/load/{form_id}")
def load_form(form_id: str, service: FormService = Depends(get_form_service)):
    try:
        spec = service.load_form(form_id)
    except Exception as e:
        logger.error(f"Failed to load form '{form_id}': {e}", exc_info=True)
        return _failure(e)
    return {"ok": True, "data": spec}


@router.get("/exists/{form_id}")
def form_exists(form_id: str, service: FormService = Depends(get_form_service)):
    try:
        exists = service.form_exists(form_id)
    except Exception as e:
        logger.error(f"Failed to check form '{form_id}': {e}", exc_info=True)
        return _failure(e)
    return {"ok": True, "data": exists}


@router.get("/list")
def list_forms(
    include_unpublished: str = Query("false", alias="includeUnpublished"),
    service: FormService = Depends(get_form_service),
):
    """Published forms; ``?includeUnpublished=true`` adds drafts."""
    try:
        forms = service.list_forms(include_unpublished=include_unpublished == "true")
    except Exception as e:
        logger.error(f"Failed to list forms: {e}", exc_info=True)
        return _failure(e)
    return {"ok": True, "data": forms}


@router.delete("/delete/{form_id}")
def delete_form(form_id: str, service: FormService = Depends(get_form_service)):
    try:
        service.delete_form(form_id)
    except Exception as e:
        logger.error(f"Failed to delete form '{form_id}': {e}", exc_info=True)
        return _failure(e)
    return {"ok": True}
