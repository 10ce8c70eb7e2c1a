"""Liveness and readiness endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response, status

from form_builder.api.dependencies import get_object_store
from form_builder.core.health import HealthChecker
from form_builder.storage.object_store import ObjectStore

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health")
async def liveness_check():
    """Confirms the process is serving. Does not touch object storage."""
    return {"status": "ok", "time": datetime.now(timezone.utc).isoformat()}


@router.get("/health/ready")
async def readiness_check(response: Response, store: ObjectStore = Depends(get_object_store)):
    report = await HealthChecker({"storage": store.ping}).run()
    if not report.ready:
        logger.error(f"Readiness check failed: {[c.to_dict() for c in report.components]}")
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return report.to_dict()
