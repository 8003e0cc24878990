"""Pydantic models for captured network resources and derived page metrics."""

from __future__ import annotations

import typing
from typing import Literal

import pydantic

from webpage_impact.utils import serialization

ResourceKind = Literal[
    "document",
    "stylesheet",
    "image",
    "media",
    "font",
    "script",
    "texttrack",
    "xhr",
    "fetch",
    "eventsource",
    "websocket",
    "manifest",
    "signedexchange",
    "ping",
    "cspviolationreport",
    "preflight",
    "other",
]

RESOURCE_KINDS: tuple[str, ...] = typing.get_args(ResourceKind)


def to_resource_kind(value: str | None) -> ResourceKind:
    """Map a browser resource type onto the closed ``ResourceKind`` set.

    Unknown or missing types are reported as ``"other"``.
    """
    kind = (value or "").lower()
    if kind in RESOURCE_KINDS:
        return typing.cast(ResourceKind, kind)
    return "other"


class ResourceBase(pydantic.BaseModel):
    """A resource seen on the page-level response stream."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True, frozen=True
    )

    url: str
    resource_size: int = pydantic.Field(ge=0)
    type: ResourceKind = "other"
    from_cache: bool = False
    from_service_worker: bool = False


class Resource(ResourceBase):
    """A resource with its on-wire transfer size (0 when unknown)."""

    transfer_size: int = pydantic.Field(default=0, ge=0)


class TransportRecord(pydantic.BaseModel):
    """Transfer accounting for one request seen on the transport session."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True, frozen=True
    )

    request_id: str
    url: str
    encoded_data_length: int = pydantic.Field(ge=0)
    from_cache: bool = False


class PageLoadOptions(pydantic.BaseModel):
    """How a single navigation is performed."""

    model_config = pydantic.ConfigDict(frozen=True)

    reload: bool
    cache_enabled: bool
    scroll_to_bottom: bool = False
    skip_bodyless_responses: bool = False


class PageLoadResult(pydantic.BaseModel):
    """Resources captured during exactly one navigation (fresh load XOR reload)."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True, frozen=True
    )

    url: str
    reload: bool
    resources: list[Resource] = pydantic.Field(default_factory=list)


class MetricsResult(pydantic.BaseModel):
    """Page weight metrics derived from an initial load and a reload."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True, frozen=True
    )

    page_weight: int
    resource_type_weights: dict[ResourceKind, int] = pydantic.Field(default_factory=dict)
    data_reload_ratio: float | None = None
