"""
Request body size limiting middleware.

Prevents memory exhaustion from large payloads.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from form_builder.api.error_handlers import error_body

logger = logging.getLogger(__name__)


class BodySizeMiddleware(BaseHTTPMiddleware):
    """Reject POST/PUT/PATCH bodies larger than ``max_size`` bytes with 413."""

    def __init__(self, app, max_size: int):
        super().__init__(app)
        self.max_size = max_size

    async def dispatch(self, request: Request, call_next):
        if request.method in ("POST", "PUT", "PATCH"):
            declared = request.headers.get("content-length")
            too_large = declared is not None and declared.isdigit() and int(declared) > self.max_size
            if not too_large:
                body = await request.body()
                too_large = len(body) > self.max_size

            if too_large:
                request_id = getattr(request.state, "request_id", "unknown")
                logger.warning(
                    f"[{request_id}] Request body too large (max: {self.max_size} bytes)"
                )
                return JSONResponse(
                    status_code=413,
                    content=error_body(
                        f"Request body exceeds maximum size of {self.max_size} bytes"
                    ),
                )

        return await call_next(request)
