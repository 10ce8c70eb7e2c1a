"""
Rate limiting middleware and utilities.

Sliding-window limits per client IP. Counters live in process memory behind
``RateLimitStore`` so a shared backend can replace them.

get_client_ip() only trusts proxy headers when TRUST_PROXY is enabled.
"""

import logging
import math
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Protocol, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from form_builder.core.config import Settings

logger = logging.getLogger(__name__)

EXEMPT_PREFIX = "/health"


def get_client_ip(request: Request, trust_proxy: bool = False) -> str:
    """
    Get real client IP address, handling proxies correctly.

    X-Forwarded-For (leftmost entry) and X-Real-IP are only honoured when
    ``trust_proxy`` is set; otherwise clients could spoof their identity to
    dodge limits.
    """
    if trust_proxy:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

    return request.client.host if request.client else "unknown"


@dataclass(frozen=True)
class RateLimitPolicy:
    """
    Rate limit policy configuration.

    Attributes:
        name: Counter namespace
        requests: Maximum number of requests allowed in the window
        window_seconds: Window length
        message: Body message when the limit is exceeded
        path_prefix: Only paths under this prefix count (None = all)
    """
    name: str
    requests: int
    window_seconds: float
    message: str
    path_prefix: Optional[str] = None

    def applies_to(self, path: str) -> bool:
        if self.path_prefix is None:
            return True
        return path == self.path_prefix or path.startswith(self.path_prefix.rstrip("/") + "/")

    def __str__(self) -> str:
        return f"{self.requests} requests per {self.window_seconds}s"


def default_policies(settings: Settings) -> List[RateLimitPolicy]:
    return [
        RateLimitPolicy(
            name="global",
            requests=settings.rate_limit_max,
            window_seconds=settings.rate_limit_window_seconds,
            message="Too many requests, please try again later.",
        ),
        RateLimitPolicy(
            name="llm",
            requests=settings.llm_rate_limit_max,
            window_seconds=settings.llm_rate_limit_window_seconds,
            message="Too many LLM requests, please try again later.",
            path_prefix="/api/llm",
        ),
    ]


class RateLimitStore(Protocol):
    """Counter backend."""

    def hit(self, key: str, window_seconds: float, now: float) -> Tuple[int, float]:
        """Record a hit; return (hits in window, oldest hit timestamp)."""
        ...

    def reset(self) -> None:
        ...


class InMemoryRateLimitStore:
    """
    Per-key timestamp logs; hits older than the window are dropped.

    Keys whose newest hit has left its window are deleted by a sweep that
    runs at most once every ``sweep_interval`` seconds.
    """

    def __init__(self, sweep_interval: float = 60.0):
        self._hits: Dict[str, Deque[float]] = {}
        self._windows: Dict[str, float] = {}
        self._sweep_interval = sweep_interval
        self._next_sweep: Optional[float] = None
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._hits)

    def hit(self, key: str, window_seconds: float, now: float) -> Tuple[int, float]:
        with self._lock:
            if self._next_sweep is None or now >= self._next_sweep:
                self._sweep(now)
                self._next_sweep = now + self._sweep_interval

            hits = self._hits.setdefault(key, deque())
            self._windows[key] = window_seconds
            cutoff = now - window_seconds
            while hits and hits[0] <= cutoff:
                hits.popleft()
            hits.append(now)
            return len(hits), hits[0]

    def _sweep(self, now: float) -> None:
        expired = [
            key for key, hits in self._hits.items()
            if not hits or hits[-1] <= now - self._windows[key]
        ]
        for key in expired:
            del self._hits[key]
            del self._windows[key]

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
            self._windows.clear()
            self._next_sweep = None


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Apply every matching policy; the first exceeded one answers 429."""

    def __init__(
        self,
        app,
        policies: List[RateLimitPolicy],
        store: Optional[RateLimitStore] = None,
        trust_proxy: bool = False,
    ):
        super().__init__(app)
        self.policies = policies
        self.store = store or InMemoryRateLimitStore()
        self.trust_proxy = trust_proxy

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path == EXEMPT_PREFIX or path.startswith(EXEMPT_PREFIX + "/"):
            return await call_next(request)

        client = get_client_ip(request, self.trust_proxy)
        now = time.time()
        tightest: Optional[Tuple[int, int, int]] = None

        for policy in self.policies:
            if not policy.applies_to(path):
                continue
            count, oldest = self.store.hit(f"{policy.name}:{client}", policy.window_seconds, now)
            remaining = max(policy.requests - count, 0)
            reset = max(math.ceil(oldest + policy.window_seconds - now), 0)
            headers = {
                "RateLimit-Limit": str(policy.requests),
                "RateLimit-Remaining": str(remaining),
                "RateLimit-Reset": str(reset),
            }

            if count > policy.requests:
                logger.warning(f"Rate limit '{policy.name}' exceeded for {client} on {path}")
                return JSONResponse(
                    status_code=429,
                    content={"status": 429, "message": policy.message},
                    headers={**headers, "Retry-After": str(reset)},
                )

            if tightest is None or remaining < tightest[1]:
                tightest = (policy.requests, remaining, reset)

        response = await call_next(request)
        if tightest is not None:
            limit, remaining, reset = tightest
            response.headers["RateLimit-Limit"] = str(limit)
            response.headers["RateLimit-Remaining"] = str(remaining)
            response.headers["RateLimit-Reset"] = str(reset)
        return response
