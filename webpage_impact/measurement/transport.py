"""
Transport-session correlation of request ids to on-wire transfer sizes.

The page-level ``Response`` object does not know how many bytes crossed
the wire.  The Chrome DevTools Protocol network domain does, but keys
its events by an ephemeral ``requestId``.  ``TransportCorrelator``
bridges the two in two phases:

1. ``Network.responseReceived`` records ``requestId -> url`` as pending.
2. ``Network.loadingFinished`` resolves a pending id into
   ``url -> TransportRecord`` with the encoded data length.

A ``loadingFinished`` without a pending id is dropped silently; the
resource is simply unresolved.  Lookups are only allowed once the
session has been closed, after which no more events are accepted.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator
from typing import Any

from playwright import async_api

from webpage_impact.models.resources import TransportRecord
from webpage_impact.utils import errors, logger

log = logger.create_logger("TransportSession")


class TransportCorrelator:
    """Per-navigation state machine: pending-by-id, then resolved-by-url."""

    def __init__(self) -> None:
        self._pending: dict[str, str] = {}
        self._served_from_cache: set[str] = set()
        self._resolved: dict[str, TransportRecord] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def resolved_count(self) -> int:
        return len(self._resolved)

    # ==========================================================================
    # Event handlers
    # ==========================================================================

    def on_request_served_from_cache(self, event: dict[str, Any]) -> None:
        """Handle ``Network.requestServedFromCache`` (memory cache hit)."""
        request_id = event.get("requestId")
        if request_id and not self._closed:
            self._served_from_cache.add(request_id)

    def on_response_received(self, event: dict[str, Any]) -> None:
        """Handle ``Network.responseReceived``: remember the id's URL."""
        if self._closed:
            return
        request_id = event.get("requestId")
        response = event.get("response") or {}
        url = response.get("url")
        if not request_id or not url:
            return
        self._pending[request_id] = url
        if response.get("fromDiskCache") or response.get("fromPrefetchCache"):
            self._served_from_cache.add(request_id)

    def on_loading_finished(self, event: dict[str, Any]) -> None:
        """Handle ``Network.loadingFinished``: resolve a pending id by URL.

        A later transfer of the same URL replaces an earlier one.
        """
        if self._closed:
            return
        request_id = event.get("requestId")
        url = self._pending.get(request_id) if request_id else None
        if url is None:
            return
        encoded = event.get("encodedDataLength") or 0
        self._resolved[url] = TransportRecord(
            request_id=request_id,
            url=url,
            encoded_data_length=max(0, round(encoded)),
            from_cache=request_id in self._served_from_cache,
        )

    # ==========================================================================
    # Lookup
    # ==========================================================================

    def close(self) -> None:
        """Stop accepting events; resolved records stay available."""
        self._closed = True
        self._pending.clear()
        self._served_from_cache.clear()

    def resolve_record(self, url: str) -> TransportRecord | None:
        """Return the transport record for *url*, if one was resolved."""
        if not self._closed:
            raise RuntimeError("Transport session is still open")
        return self._resolved.get(url)

    def resolve(self, url: str) -> int | None:
        """Return the transfer size for *url*, or ``None`` when unresolved."""
        record = self.resolve_record(url)
        return record.encoded_data_length if record else None


@contextlib.asynccontextmanager
async def transport_session(
    page: async_api.Page,
    *,
    cache_enabled: bool = True,
) -> AsyncIterator[TransportCorrelator]:
    """Open a CDP session on *page* and feed its network events to a correlator.

    Network instrumentation and the cache policy are configured before
    the body runs, so the caller must navigate inside the ``async with``
    block.  The correlator is closed and the session detached on exit,
    whether or not the body raised.
    """
    correlator = TransportCorrelator()
    cdp = await page.context.new_cdp_session(page)
    try:
        await cdp.send("Network.enable")
        await cdp.send("Network.setCacheDisabled", {"cacheDisabled": not cache_enabled})
        cdp.on("Network.requestServedFromCache", correlator.on_request_served_from_cache)
        cdp.on("Network.responseReceived", correlator.on_response_received)
        cdp.on("Network.loadingFinished", correlator.on_loading_finished)
        yield correlator
    finally:
        correlator.close()
        try:
            await cdp.detach()
        except Exception as exc:
            log.debug("CDP session detach error (non-fatal)", {"error": errors.get_error_message(exc)})
        log.debug("Transport session closed", {"resolved": correlator.resolved_count})
