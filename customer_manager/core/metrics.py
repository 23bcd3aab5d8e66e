"""Per-route request counters kept in process memory.

Counters are keyed by ``(route template, method)`` so every customer id maps
to the same entry. They reset when the process restarts.
"""
from __future__ import annotations

from dataclasses import dataclass
from threading import Lock


@dataclass
class RouteStats:
    requests: int = 0
    duration_ms: float = 0.0
    failures: int = 0

    def as_dict(self) -> dict[str, float | int]:
        average = self.duration_ms / self.requests if self.requests else 0.0
        return {
            "total_requests": self.requests,
            "total_duration_ms": round(self.duration_ms, 2),
            "avg_duration_ms": round(average, 2),
            "error_count": self.failures,
        }


class RouteMetrics:
    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], RouteStats] = {}
        self._lock = Lock()

    def observe(self, endpoint: str, method: str, status_code: int, duration_ms: float) -> None:
        with self._lock:
            stats = self._routes.setdefault((endpoint, method), RouteStats())
            stats.requests += 1
            stats.duration_ms += duration_ms
            if status_code >= 400:
                stats.failures += 1

    def snapshot(self) -> dict[str, dict[str, float | int]]:
        with self._lock:
            return {f"{method} {endpoint}": stats.as_dict() for (endpoint, method), stats in self._routes.items()}

    def reset(self) -> None:
        with self._lock:
            self._routes.clear()


request_metrics = RouteMetrics()
