"""Pydantic models for measurement configuration and per-URL inputs.

Configuration arrives from two places: the global config the
``WebpageImpact`` runner is built with, and the per-call config passed
to ``execute``.  Both are validated with the same schema and merged,
per-call keys winning.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

import pydantic

from webpage_impact.browser import device_configs, network_conditions
from webpage_impact.utils import serialization

AcceptEncoding = Literal["gzip", "compress", "deflate", "br", "zstd", "identity", "*"]


class ConfigValidationError(ValueError):
    """Raised when a config or input does not match its schema."""


class RequestHeaders(pydantic.BaseModel):
    """Request headers overridden on every request the page makes."""

    model_config = pydantic.ConfigDict(populate_by_name=True)

    accept: str | None = None
    accept_encoding: list[AcceptEncoding] | str | None = pydantic.Field(
        default=None, alias="accept-encoding"
    )

    def to_http_headers(self) -> dict[str, str]:
        """Return the configured headers as a header dict (lists joined with ``", "``)."""
        headers: dict[str, str] = {}
        if self.accept:
            headers["accept"] = self.accept
        if self.accept_encoding:
            if isinstance(self.accept_encoding, list):
                headers["accept-encoding"] = ", ".join(self.accept_encoding)
            else:
                headers["accept-encoding"] = self.accept_encoding
        return headers


class MeasurementOptions(pydantic.BaseModel):
    """Options whose presence changes what gets computed."""

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True
    )

    data_reload_ratio: float | None = None


class MeasurementConfig(pydantic.BaseModel):
    """Validated measurement configuration.

    Attributes:
        timeout: Default navigation timeout in milliseconds.
        mobile_device: Name of a profile in ``DEVICE_CONFIGS``.
        emulate_network_conditions: Name of a profile in ``NETWORK_CONDITIONS``.
        scroll_to_bottom: Scroll the page to the bottom after each load.
        headers: Request header overrides.
        options: Pre-supplied values such as ``dataReloadRatio``.
        lighthouse: Run the external Lighthouse audit after both loads.
        skip_bodyless_responses: Drop 204/304 responses to non-OPTIONS requests.
    """

    model_config = pydantic.ConfigDict(
        alias_generator=serialization.snake_to_camel, populate_by_name=True
    )

    timeout: float | None = pydantic.Field(default=None, ge=0)
    mobile_device: str | None = None
    emulate_network_conditions: str | None = None
    scroll_to_bottom: bool | None = None
    headers: RequestHeaders | None = None
    options: MeasurementOptions | None = None
    lighthouse: bool | None = None
    skip_bodyless_responses: bool | None = None

    @pydantic.field_validator("mobile_device")
    @classmethod
    def _known_device(cls, value: str | None) -> str | None:
        if value and value not in device_configs.DEVICE_CONFIGS:
            raise ValueError(
                f"Mobile device must be one of: {', '.join(device_configs.DEVICE_CONFIGS)}."
            )
        return value

    @pydantic.field_validator("emulate_network_conditions")
    @classmethod
    def _known_network_condition(cls, value: str | None) -> str | None:
        if value and value not in network_conditions.NETWORK_CONDITIONS:
            raise ValueError(
                f"Network condition must be one of: {', '.join(network_conditions.NETWORK_CONDITIONS)}."
            )
        return value

    @property
    def supplied_data_reload_ratio(self) -> float | None:
        return self.options.data_reload_ratio if self.options else None


class MeasurementInput(pydantic.BaseModel):
    """A single input row; only ``url`` is required."""

    model_config = pydantic.ConfigDict(populate_by_name=True)

    url: str = pydantic.Field(min_length=1)
    timer_start: datetime | None = pydantic.Field(default=None, alias="timer/start")
    timestamp: str | None = None
    options: dict[str, Any] | None = None


def _format_validation_error(error: pydantic.ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item["loc"])
        message = item["msg"].removeprefix("Value error, ")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


def validate_config(data: dict[str, Any] | None) -> MeasurementConfig:
    """Validate a raw config dict, raising ``ConfigValidationError`` on failure."""
    try:
        return MeasurementConfig.model_validate(data or {})
    except pydantic.ValidationError as exc:
        raise ConfigValidationError(_format_validation_error(exc)) from exc


def validate_input(data: dict[str, Any]) -> MeasurementInput:
    """Validate a raw input row, raising ``ConfigValidationError`` on failure."""
    try:
        return MeasurementInput.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ConfigValidationError(_format_validation_error(exc)) from exc


def merge_configs(base: MeasurementConfig, override: MeasurementConfig) -> MeasurementConfig:
    """Shallow-merge two configs; keys explicitly set on *override* win."""
    merged = base.model_dump(exclude_unset=True)
    merged.update(override.model_dump(exclude_unset=True))
    return MeasurementConfig.model_validate(merged)
