"""Pydantic models for device emulation and network throttling profiles."""

from __future__ import annotations

import pydantic


class ViewportSize(pydantic.BaseModel):
    """Viewport dimensions for browser emulation."""

    width: int
    height: int


class DeviceConfig(pydantic.BaseModel):
    """Device configuration for browser emulation."""

    user_agent: str
    viewport: ViewportSize
    device_scale_factor: float
    is_mobile: bool
    has_touch: bool


class NetworkConditions(pydantic.BaseModel):
    """Throughput (bytes/s) and latency (ms) for network throttling."""

    download: float
    upload: float
    latency: float

    def to_cdp_params(self) -> dict[str, object]:
        """Return parameters for ``Network.emulateNetworkConditions``."""
        return {
            "offline": False,
            "latency": self.latency,
            "downloadThroughput": self.download,
            "uploadThroughput": self.upload,
        }
