"""PDF export endpoint."""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse, Response

from form_builder.api.dependencies import get_pdf_renderer
from form_builder.api.exceptions import ValidationError
from form_builder.pdf.renderer import PdfRenderer, content_disposition, pdf_filename

router = APIRouter(prefix="/api/form", tags=["export"])
logger = logging.getLogger(__name__)


@router.post("/export-pdf")
async def export_pdf(payload: Any = Body(None), renderer: PdfRenderer = Depends(get_pdf_renderer)):
    """Render ``{spec, value}`` as a downloadable PDF."""
    payload = payload if isinstance(payload, dict) else {}
    spec = payload.get("spec")
    value = payload.get("value")

    if not isinstance(spec, dict) or not spec.get("name"):
        raise ValidationError("Invalid form specification")
    if not isinstance(value, dict):
        raise ValidationError("Invalid form values")

    name = str(spec["name"])
    logger.info(f"Generating PDF for form: {name}")
    try:
        pdf = await renderer.render_pdf(spec, value)
    except Exception as e:
        logger.error(f"PDF generation error: {e}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"ok": False, "error": f"Failed to generate PDF: {e}"},
        )

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(pdf_filename(name))},
    )
