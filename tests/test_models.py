"""Tests for webpage_impact.models.resources — resource and metrics models."""

from __future__ import annotations

import pydantic
import pytest

from webpage_impact.models.resources import (
    RESOURCE_KINDS,
    MetricsResult,
    Resource,
    ResourceBase,
    to_resource_kind,
)


class TestToResourceKind:
    @pytest.mark.parametrize("kind", RESOURCE_KINDS)
    def test_known_kinds_kept(self, kind: str) -> None:
        assert to_resource_kind(kind) == kind

    @pytest.mark.parametrize("value", ["beacon", "", None, "prefetch"])
    def test_unknown_kinds_become_other(self, value: str | None) -> None:
        assert to_resource_kind(value) == "other"

    def test_case_insensitive(self) -> None:
        assert to_resource_kind("Script") == "script"


class TestResource:
    def test_camel_case_dump(self) -> None:
        resource = Resource(url="https://example.com/", resource_size=10, type="document", transfer_size=20)
        assert resource.model_dump(by_alias=True) == {
            "url": "https://example.com/",
            "resourceSize": 10,
            "type": "document",
            "fromCache": False,
            "fromServiceWorker": False,
            "transferSize": 20,
        }

    def test_negative_size_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ResourceBase(url="https://example.com/", resource_size=-1)

    def test_frozen(self) -> None:
        resource = Resource(url="https://example.com/", resource_size=1)
        with pytest.raises(pydantic.ValidationError):
            resource.transfer_size = 5  # type: ignore[misc]


class TestMetricsResult:
    def test_defaults(self) -> None:
        metrics = MetricsResult(page_weight=0)
        assert metrics.resource_type_weights == {}
        assert metrics.data_reload_ratio is None
