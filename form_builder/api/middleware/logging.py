"""Access log lines and ``X-Process-Time`` for every request."""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request on arrival and on completion, tagged with its request id."""

    async def dispatch(self, request: Request, call_next):
        tag = f"[{getattr(request.state, 'request_id', '-')}] {request.method} {request.url.path}"
        client = request.client.host if request.client else "unknown"
        logger.info(f"{tag} from {client}")

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"{tag} failed after {_elapsed_ms(started):.2f}ms: {e}", exc_info=True)
            raise

        elapsed = _elapsed_ms(started)
        logger.info(f"{tag} -> {response.status_code} ({elapsed:.2f}ms)")
        response.headers["X-Process-Time"] = f"{elapsed:.2f}ms"
        return response
