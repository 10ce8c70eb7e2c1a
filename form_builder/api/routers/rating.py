"""Answer rating endpoints under ``/api/llm``."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from form_builder.api.dependencies import get_rating_service
from form_builder.domain.field_rating import (
    FieldInputError,
    parse_detailed_row,
    parse_simple_field,
)
from form_builder.llm.rating_service import RatingService

router = APIRouter(prefix="/api/llm", tags=["rating"])
logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


def _bad_request(e: FieldInputError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"ok": False, "error": str(e)})


def _internal_error() -> JSONResponse:
    return JSONResponse(status_code=500, content={"ok": False, "error": INTERNAL_ERROR})


@router.post("/rate-simple-field")
async def rate_simple_field(
    payload: Any = Body(None),
    service: RatingService = Depends(get_rating_service),
):
    """Rate one free-text answer: ``{comment, rate?, suggestionResponse?}``."""
    try:
        field = parse_simple_field(payload)
    except FieldInputError as e:
        return _bad_request(e)

    try:
        result = await service.rate_simple_field(field)
    except Exception as e:
        logger.error(f"Simple field rating error: {e}", exc_info=True)
        return _internal_error()
    return {"ok": True, "data": result}


@router.post("/rate-detailed-row")
async def rate_detailed_row(
    payload: Any = Body(None),
    service: RatingService = Depends(get_rating_service),
):
    """Rate one attribute of one row of a detailed question."""
    try:
        row = parse_detailed_row(payload)
    except FieldInputError as e:
        return _bad_request(e)

    try:
        result = await service.rate_detailed_row(row)
    except Exception as e:
        logger.error(f"Detailed row rating error: {e}", exc_info=True)
        return _internal_error()
    return {"ok": True, "data": result}


@router.post("/rate")
async def rate_form(
    payload: Any = Body(None),
    service: RatingService = Depends(get_rating_service),
):
    """Rate a whole form. Never fails: errors yield empty ratings."""
    empty = {"ok": True, "data": {"ratings": {}}}
    payload = payload if isinstance(payload, dict) else {}
    spec = payload.get("spec")
    if not isinstance(spec, dict) or not isinstance(spec.get("sections"), list):
        return empty

    try:
        ratings = await service.rate_form(spec, payload.get("value"))
    except Exception as e:
        logger.error(f"Form rating failed, returning empty ratings: {e}", exc_info=True)
        return empty
    return {"ok": True, "data": {"ratings": ratings}}
