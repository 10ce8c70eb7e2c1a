"""Readiness probes.

A probe is a blocking callable that raises when its dependency is
unreachable. Probes run concurrently in worker threads.
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

Probe = Callable[[], None]

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"


@dataclass
class ProbeResult:
    name: str
    status: str
    latency_ms: float
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "latency_ms": round(self.latency_ms, 2),
            "message": self.message,
        }


@dataclass
class HealthReport:
    components: List[ProbeResult]
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def ready(self) -> bool:
        return all(c.status == HEALTHY for c in self.components)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "ready" if self.ready else "not_ready",
            "checked_at": self.checked_at.isoformat(),
            "components": [c.to_dict() for c in self.components],
        }


class HealthChecker:
    def __init__(self, probes: Optional[Mapping[str, Probe]] = None):
        self._probes: Dict[str, Probe] = dict(probes or {})

    def register(self, name: str, probe: Probe) -> None:
        self._probes[name] = probe

    @staticmethod
    async def _run_probe(name: str, probe: Probe) -> ProbeResult:
        started = time.perf_counter()
        try:
            await asyncio.to_thread(probe)
        except Exception as e:
            return ProbeResult(name, UNHEALTHY, (time.perf_counter() - started) * 1000, str(e))
        return ProbeResult(name, HEALTHY, (time.perf_counter() - started) * 1000)

    async def run(self) -> HealthReport:
        results = await asyncio.gather(
            *(self._run_probe(name, probe) for name, probe in self._probes.items())
        )
        return HealthReport(components=list(results))
