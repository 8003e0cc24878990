"""Shared fixtures for the test suite."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from webpage_impact.measurement.diagnostics import RecordingDiagnostics
from webpage_impact.models.resources import Resource


@pytest.fixture()
def diagnostics() -> RecordingDiagnostics:
    """A diagnostics sink that records instead of printing."""
    return RecordingDiagnostics()


@pytest.fixture()
def make_resource() -> Callable[..., Resource]:
    """Factory for ``Resource`` instances with sensible defaults."""

    def _make(
        type: str = "image",
        transfer_size: int = 0,
        *,
        from_cache: bool = False,
        url: str | None = None,
        resource_size: int = 0,
    ) -> Resource:
        return Resource(
            url=url or f"https://example.com/{type}-{transfer_size}",
            resource_size=resource_size,
            type=type,
            from_cache=from_cache,
            transfer_size=transfer_size,
        )

    return _make
