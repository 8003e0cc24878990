"""Tests for webpage_impact.app — route handlers called directly."""

from __future__ import annotations

from unittest import mock

import fastapi
import pytest

from webpage_impact import app


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self) -> None:
        assert await app.health() == {"status": "ok"}


class TestMeasureEndpoint:
    @pytest.mark.asyncio
    async def test_returns_outputs(self) -> None:
        outputs = [{"url": "https://example.com", "network/data/bytes": 10}]
        with mock.patch.object(app.runner, "execute", mock.AsyncMock(return_value=outputs)) as execute:
            response = await app.measure_endpoint(
                app.MeasureRequest(inputs=[{"url": "https://example.com"}], config={"timeout": 1000})
            )

        assert response.outputs == outputs
        execute.assert_awaited_once_with([{"url": "https://example.com"}], {"timeout": 1000})

    @pytest.mark.asyncio
    async def test_invalid_config_is_422(self) -> None:
        with pytest.raises(fastapi.HTTPException) as exc_info:
            await app.measure_endpoint(
                app.MeasureRequest(inputs=[{"url": "https://example.com"}], config={"mobileDevice": "Toaster"})
            )
        assert exc_info.value.status_code == 422


class TestMeasureStreamEndpoint:
    @pytest.mark.asyncio
    async def test_unknown_network_is_422(self) -> None:
        with pytest.raises(fastapi.HTTPException) as exc_info:
            await app.measure_stream_endpoint(url="https://example.com", device=None, network="Dial-up", scroll=False)
        assert exc_info.value.status_code == 422

    @pytest.mark.asyncio
    async def test_returns_event_stream(self) -> None:
        response = await app.measure_stream_endpoint(url="https://example.com", device="Pixel 7", network=None, scroll=True)
        assert response.media_type == "text/event-stream"
