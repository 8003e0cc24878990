"""Tests for webpage_impact.measurement.transport — request id to transfer size correlation."""

from __future__ import annotations

import pytest

from tests.fakes import FakePage
from webpage_impact.measurement.transport import TransportCorrelator, transport_session


def _received(request_id: str, url: str, **response: object) -> dict[str, object]:
    return {"requestId": request_id, "response": {"url": url, **response}}


def _finished(request_id: str, length: float) -> dict[str, object]:
    return {"requestId": request_id, "encodedDataLength": length}


class TestTransportCorrelator:
    """Tests for the two-phase pending -> resolved state machine."""

    def test_resolves_after_both_events(self) -> None:
        correlator = TransportCorrelator()
        correlator.on_response_received(_received("1", "https://example.com/"))
        correlator.on_loading_finished(_finished("1", 2048))
        correlator.close()

        assert correlator.resolve("https://example.com/") == 2048

    def test_pending_only_is_unresolved(self) -> None:
        correlator = TransportCorrelator()
        correlator.on_response_received(_received("1", "https://example.com/app.js"))
        assert correlator.pending_count == 1
        correlator.close()

        assert correlator.resolve("https://example.com/app.js") is None

    def test_finished_without_received_is_dropped(self) -> None:
        correlator = TransportCorrelator()
        correlator.on_loading_finished(_finished("orphan", 999))
        correlator.close()

        assert correlator.resolved_count == 0

    def test_finished_for_other_id_does_not_resolve(self) -> None:
        correlator = TransportCorrelator()
        correlator.on_response_received(_received("1", "https://example.com/a.css"))
        correlator.on_loading_finished(_finished("2", 10))
        correlator.close()

        assert correlator.resolve("https://example.com/a.css") is None

    def test_later_transfer_of_same_url_wins(self) -> None:
        correlator = TransportCorrelator()
        correlator.on_response_received(_received("1", "https://example.com/logo.png"))
        correlator.on_loading_finished(_finished("1", 500))
        correlator.on_response_received(_received("2", "https://example.com/logo.png"))
        correlator.on_loading_finished(_finished("2", 0))
        correlator.close()

        assert correlator.resolve("https://example.com/logo.png") == 0

    def test_fractional_length_rounds(self) -> None:
        correlator = TransportCorrelator()
        correlator.on_response_received(_received("1", "https://example.com/"))
        correlator.on_loading_finished(_finished("1", 99.6))
        correlator.close()

        assert correlator.resolve("https://example.com/") == 100

    def test_disk_cache_flag(self) -> None:
        correlator = TransportCorrelator()
        correlator.on_response_received(_received("1", "https://example.com/a.js", fromDiskCache=True))
        correlator.on_loading_finished(_finished("1", 0))
        correlator.close()

        record = correlator.resolve_record("https://example.com/a.js")
        assert record is not None
        assert record.from_cache is True

    def test_memory_cache_flag(self) -> None:
        correlator = TransportCorrelator()
        correlator.on_request_served_from_cache({"requestId": "1"})
        correlator.on_response_received(_received("1", "https://example.com/a.js"))
        correlator.on_loading_finished(_finished("1", 0))
        correlator.close()

        record = correlator.resolve_record("https://example.com/a.js")
        assert record is not None
        assert record.from_cache is True

    def test_network_transfer_not_flagged(self) -> None:
        correlator = TransportCorrelator()
        correlator.on_response_received(_received("1", "https://example.com/a.js"))
        correlator.on_loading_finished(_finished("1", 300))
        correlator.close()

        record = correlator.resolve_record("https://example.com/a.js")
        assert record is not None
        assert record.from_cache is False

    def test_events_after_close_are_ignored(self) -> None:
        correlator = TransportCorrelator()
        correlator.close()
        correlator.on_response_received(_received("1", "https://example.com/"))
        correlator.on_loading_finished(_finished("1", 10))

        assert correlator.resolve("https://example.com/") is None

    def test_resolve_before_close_raises(self) -> None:
        correlator = TransportCorrelator()
        with pytest.raises(RuntimeError):
            correlator.resolve("https://example.com/")

    def test_missing_fields_are_ignored(self) -> None:
        correlator = TransportCorrelator()
        correlator.on_response_received({"requestId": "1"})
        correlator.on_response_received({"response": {"url": "https://example.com/"}})
        correlator.on_loading_finished({})
        assert correlator.pending_count == 0


class TestTransportSession:
    """Tests for the transport_session() context manager."""

    @pytest.mark.asyncio
    async def test_enables_network_and_cache_policy(self) -> None:
        page = FakePage()
        async with transport_session(page, cache_enabled=False):  # type: ignore[arg-type]
            cdp = page.context.cdp_sessions[0]
            assert cdp.sent == [
                ("Network.enable", None),
                ("Network.setCacheDisabled", {"cacheDisabled": True}),
            ]

    @pytest.mark.asyncio
    async def test_routes_events_and_detaches(self) -> None:
        page = FakePage()
        async with transport_session(page) as correlator:  # type: ignore[arg-type]
            cdp = page.context.cdp_sessions[0]
            cdp.emit("Network.responseReceived", _received("7", "https://example.com/"))
            cdp.emit("Network.loadingFinished", _finished("7", 321))

        assert cdp.detached is True
        assert correlator.closed is True
        assert correlator.resolve("https://example.com/") == 321

    @pytest.mark.asyncio
    async def test_detaches_when_body_raises(self) -> None:
        page = FakePage()
        with pytest.raises(ValueError):
            async with transport_session(page):  # type: ignore[arg-type]
                raise ValueError("navigation failed")

        assert page.context.cdp_sessions[0].detached is True
