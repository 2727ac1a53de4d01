"""Prometheus metrics for the LocaLink backend.

Provides:
- HTTP request metrics (count, duration, status breakdown)
- Relay write counters per relay kind
- Automation notification delivery counters per outcome

Exposes a plain-text /metrics endpoint compatible with any Prometheus scraper.
Generates the exposition format directly from an in-process store.
"""

import time
import threading
from collections import defaultdict
from typing import Optional

from fastapi import APIRouter, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

_lock = threading.Lock()

_counters: dict[str, float] = defaultdict(float)
_histograms: dict[str, list[float]] = defaultdict(list)
_start_time = time.time()


def inc(name: str, value: float = 1.0, labels: Optional[dict] = None) -> None:
    key = _label_key(name, labels)
    with _lock:
        _counters[key] += value


def observe(name: str, value: float, labels: Optional[dict] = None) -> None:
    key = _label_key(name, labels)
    with _lock:
        _histograms[key].append(value)
        if len(_histograms[key]) > 10_000:
            _histograms[key] = _histograms[key][-5_000:]


def get_counter(name: str, labels: Optional[dict] = None) -> float:
    """Current value of a counter (0.0 if never incremented)."""
    with _lock:
        return _counters.get(_label_key(name, labels), 0.0)


def reset() -> None:
    """Drop every recorded sample."""
    with _lock:
        _counters.clear()
        _histograms.clear()


def _label_key(name: str, labels: Optional[dict] = None) -> str:
    if not labels:
        return name
    label_str = ",".join(f'{k}="{v}"' for k, v in sorted(labels.items()))
    return f"{name}{{{label_str}}}"


def generate_metrics() -> str:
    """Generate Prometheus exposition format text."""
    lines: list[str] = [
        "# HELP localink_uptime_seconds Time since application start.",
        "# TYPE localink_uptime_seconds gauge",
        f"localink_uptime_seconds {time.time() - _start_time:.1f}",
        "",
    ]

    with _lock:
        seen_names: set[str] = set()
        for key, val in sorted(_counters.items()):
            base_name = key.split("{")[0]
            if base_name not in seen_names:
                lines.append(f"# TYPE {base_name} counter")
                seen_names.add(base_name)
            lines.append(f"{key} {val}")

        # Histograms are exported as summaries (sum and count only)
        seen_names = set()
        for key, values in sorted(_histograms.items()):
            base_name = key.split("{")[0]
            if base_name not in seen_names:
                lines.append(f"# TYPE {base_name} summary")
                seen_names.add(base_name)
            if values:
                label_part = key[len(base_name):]
                lines.append(f"{base_name}_count{label_part} {len(values)}")
                lines.append(f"{base_name}_sum{label_part} {sum(values):.4f}")

    return "\n".join(lines) + "\n"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Track HTTP request count and duration per method/route/status."""

    async def dispatch(self, request: Request, call_next):
        if request.url.path == "/metrics":
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start

        labels = {
            "method": request.method,
            "path": request.url.path.rstrip("/") or "/",
            "status": str(response.status_code),
        }
        inc("localink_http_requests_total", labels=labels)
        observe("localink_http_request_duration_seconds", duration, labels=labels)

        return response


metrics_router = APIRouter()


@metrics_router.get("/metrics", include_in_schema=False)
async def prometheus_metrics():
    """Prometheus-compatible metrics endpoint."""
    return Response(
        content=generate_metrics(),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
