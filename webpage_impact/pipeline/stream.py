"""
Streaming single-URL measurement with progress updates over SSE.

Runs ``measure_page_impact_metrics`` in a background task and relays
its progress callbacks through a queue, so each stage reaches the
client as soon as it starts.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncGenerator

from webpage_impact import settings
from webpage_impact.models import config as config_mod
from webpage_impact.pipeline import measure, sse_helpers
from webpage_impact.utils import errors, logger

log = logger.create_logger("MeasureStream")


async def measure_url_stream(
    url: str,
    measurement_config: config_mod.MeasurementConfig,
    browser_settings: settings.BrowserSettings | None = None,
) -> AsyncGenerator[str, None]:
    """Yield SSE progress events for one URL, then ``complete`` or ``error``."""
    if not url:
        yield sse_helpers.format_error_event(url, "URL is required")
        return

    logger.clear_log_buffer()
    queue: asyncio.Queue[str] = asyncio.Queue()

    def on_progress(step: str, message: str, progress: int) -> None:
        queue.put_nowait(sse_helpers.format_progress_event(step, message, progress))

    yield sse_helpers.format_progress_event("init", "Starting measurement...", 5)
    task = asyncio.create_task(
        measure.measure_page_impact_metrics(
            url, measurement_config, browser_settings=browser_settings, on_progress=on_progress
        )
    )
    try:
        while not task.done() or not queue.empty():
            getter = asyncio.ensure_future(queue.get())
            done, _ = await asyncio.wait({getter, task}, return_when=asyncio.FIRST_COMPLETED)
            if getter in done:
                yield getter.result()
            else:
                getter.cancel()

        try:
            result = task.result()
        except errors.MeasurementError as exc:
            log.error("Streamed measurement failed", {"url": url, "error": str(exc)})
            yield sse_helpers.format_error_event(url, str(exc))
            return
        yield sse_helpers.format_complete_event(url, result.metrics, logger.get_log_buffer())
    finally:
        if not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
