"""
Server-Sent Events formatting helpers.

Pure functions with no side-effects.
"""

from __future__ import annotations

import json
from typing import Any

from webpage_impact.models.resources import MetricsResult


def format_sse_event(event_type: str, data: dict[str, Any]) -> str:
    """Format a Server-Sent Event string."""
    return f"event: {event_type}\ndata: {json.dumps(data)}\n\n"


def format_progress_event(step: str, message: str, progress: int) -> str:
    """Format a progress SSE event."""
    return format_sse_event(
        "progress",
        {"step": step, "message": message, "progress": progress},
    )


def format_complete_event(url: str, metrics: MetricsResult, debug_log: list[str] | None = None) -> str:
    """Format the final metrics as a ``complete`` SSE event with camelCase keys."""
    data: dict[str, Any] = {"url": url, **metrics.model_dump(by_alias=True)}
    if debug_log is not None:
        data["debugLog"] = debug_log
    return format_sse_event("complete", data)


def format_error_event(url: str, message: str) -> str:
    """Format a measurement failure as an ``error`` SSE event."""
    return format_sse_event("error", {"url": url, "error": message})
