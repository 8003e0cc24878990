"""
Page load recorder: one navigation in, one list of resources out.

Each call to ``load_page_resources`` performs exactly one navigation
(a fresh ``goto`` or a ``reload``) under a given cache policy.  While it
runs, two streams are observed:

- the page-level ``response`` event, which yields the URL, decoded body
  size, resource type and service-worker flag of every response;
- the transport session (see ``transport.py``), which yields the
  on-wire transfer size and memory/disk cache hits.

Both are merged by URL once the navigation has settled.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import Callable, Iterator, Sequence
from typing import Any

from playwright import async_api

from webpage_impact.measurement import diagnostics as diagnostics_mod
from webpage_impact.measurement import network_filter, transport
from webpage_impact.models.resources import (
    PageLoadOptions,
    PageLoadResult,
    Resource,
    ResourceBase,
    to_resource_kind,
)
from webpage_impact.utils import errors, logger

log = logger.create_logger("PageLoadRecorder")

_error = errors.build_error_message("WebpageImpact")

# Auto-scroll step (px) and tick interval (ms).
SCROLL_DISTANCE_PX = 100
SCROLL_INTERVAL_MS = 100

# Upper bound on waiting for response bodies once the page has settled.
# Streaming responses (EventSource, long-poll, media ranges) never finish.
BODY_DRAIN_TIMEOUT_S = 10.0

_SCROLL_TO_BOTTOM_SCRIPT = """
async ({ distance, intervalMs }) => {
    const currentHeight = () => (document.body ? document.body.scrollHeight : 0);
    return await new Promise((resolve) => {
        let totalHeight = 0;
        let previousHeight = currentHeight();
        let shrinkCount = 0;
        const timer = setInterval(() => {
            const scrollHeight = currentHeight();
            if (scrollHeight < previousHeight) {
                shrinkCount += 1;
            }
            previousHeight = scrollHeight;
            window.scrollBy(0, distance);
            totalHeight += distance;
            if (totalHeight >= scrollHeight) {
                clearInterval(timer);
                resolve({ scrolled: totalHeight, finalHeight: scrollHeight, shrinkCount });
            }
        }, intervalMs);
    });
}
"""


@contextlib.contextmanager
def _subscribed(
    page: async_api.Page,
    event: str,
    handler: Callable[[Any], None],
) -> Iterator[None]:
    """Register *handler* for *event* on *page* for the duration of the block."""
    page.on(event, handler)
    try:
        yield
    finally:
        page.remove_listener(event, handler)


async def scroll_to_bottom(
    page: async_api.Page,
    diagnostics: diagnostics_mod.Diagnostics | None = None,
) -> dict[str, Any]:
    """Scroll incrementally until the scrolled distance reaches the live page height.

    The height is re-read on every tick, so pages that grow while being
    scrolled (lazy loading, infinite lists) are followed to the end.
    """
    sink = diagnostics or diagnostics_mod.default_diagnostics()
    result: dict[str, Any] = await page.evaluate(
        _SCROLL_TO_BOTTOM_SCRIPT,
        {"distance": SCROLL_DISTANCE_PX, "intervalMs": SCROLL_INTERVAL_MS},
    )
    if result.get("shrinkCount"):
        sink.warn(
            "Page height decreased while scrolling to bottom",
            {"shrinkCount": result["shrinkCount"], "finalHeight": result.get("finalHeight")},
        )
    return result


async def _drain_body_reads(
    body_reads: dict[asyncio.Task[None], str],
    sink: diagnostics_mod.Diagnostics,
) -> None:
    """Wait for outstanding body reads; cancel and report those still pending at the deadline."""
    reads = dict(body_reads)
    _done, pending = await asyncio.wait(set(reads), timeout=BODY_DRAIN_TIMEOUT_S)
    for task in pending:
        task.cancel()
        sink.error(
            "Error accessing response body",
            {"url": reads[task], "error": f"Body not received within {BODY_DRAIN_TIMEOUT_S}s"},
        )
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)


def merge_transfer_sizes(
    resources: Sequence[ResourceBase],
    correlator: transport.TransportCorrelator,
    diagnostics: diagnostics_mod.Diagnostics | None = None,
) -> list[Resource]:
    """Attach the transport session's transfer sizes to page-level resources.

    A resource without a resolved transport record keeps
    ``transfer_size=0`` and a warning is emitted.
    """
    sink = diagnostics or diagnostics_mod.default_diagnostics()
    merged: list[Resource] = []
    for resource in resources:
        record = correlator.resolve_record(resource.url)
        if record is None:
            sink.warn("No encoded data length for resource", {"url": resource.url})
        merged.append(
            Resource.model_validate({
                **resource.model_dump(),
                "transfer_size": record.encoded_data_length if record else 0,
                "from_cache": resource.from_cache or bool(record and record.from_cache),
            })
        )
    return merged


async def load_page_resources(
    page: async_api.Page,
    url: str,
    options: PageLoadOptions,
    diagnostics: diagnostics_mod.Diagnostics | None = None,
) -> PageLoadResult:
    """Navigate (or reload) *page* once and return every network resource it fetched.

    Args:
        page: The page to drive; reused across the initial load and reload.
        url: Target URL (ignored when ``options.reload`` is set).
        options: Reload vs. fresh load, cache policy and scrolling.
        diagnostics: Sink for non-fatal findings.

    Returns:
        The resources in the order their responses arrived.

    Raises:
        errors.MeasurementError: Navigation or instrumentation failed.
    """
    sink = diagnostics or diagnostics_mod.default_diagnostics()
    slots: list[ResourceBase | None] = []
    body_reads: dict[asyncio.Task[None], str] = {}

    async def capture(slot: int, response: async_api.Response) -> None:
        try:
            request = response.request
            if network_filter.is_from_non_network_request(request.url):
                return
            if options.skip_bodyless_responses and network_filter.has_no_response_body(
                response.status, request.method
            ):
                return
            body = await response.body()
            slots[slot] = ResourceBase(
                url=response.url,
                resource_size=len(body),
                type=to_resource_kind(request.resource_type),
                from_service_worker=bool(response.from_service_worker),
            )
        except Exception as exc:
            sink.error(
                "Error accessing response body",
                {"url": response.url, "error": errors.get_error_message(exc)},
            )

    def on_response(response: async_api.Response) -> None:
        slots.append(None)
        task = asyncio.ensure_future(capture(len(slots) - 1, response))
        body_reads[task] = response.url
        task.add_done_callback(lambda done: body_reads.pop(done, None))

    log.debug("Loading page", {"url": url, "reload": options.reload, "cacheEnabled": options.cache_enabled})
    try:
        async with transport.transport_session(page, cache_enabled=options.cache_enabled) as correlator:
            try:
                with _subscribed(page, "response", on_response):
                    if options.reload:
                        await page.reload(wait_until="networkidle")
                    else:
                        await page.goto(url, wait_until="networkidle")

                    if options.scroll_to_bottom:
                        await scroll_to_bottom(page, sink)

                if body_reads:
                    await _drain_body_reads(body_reads, sink)
            finally:
                for task in list(body_reads):
                    task.cancel()
    except Exception as exc:
        raise errors.MeasurementError(
            _error(f"Error during measurement of webpage: {errors.get_error_message(exc)}")
        ) from exc

    resources = merge_transfer_sizes(
        [resource for resource in slots if resource is not None],
        correlator,
        sink,
    )
    log.debug("Page load recorded", {"url": url, "reload": options.reload, "resources": len(resources)})
    return PageLoadResult(url=url, reload=options.reload, resources=resources)
