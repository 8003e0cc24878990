"""
Environment-driven settings for the server, the browser and default measurement config.

Uses ``pydantic_settings.BaseSettings`` for environment variable binding,
type coercion and validation.  A ``.env`` file in the working directory
is loaded by ``app.py`` via python-dotenv before any settings are read.
"""

from __future__ import annotations

from typing import Any

import pydantic
import pydantic_settings


class ServerSettings(pydantic_settings.BaseSettings):
    """HTTP server configuration.

    Attributes:
        host: Interface uvicorn binds to.
        port: Port uvicorn listens on.
        environment: ``production`` disables auto-reload.
    """

    host: str = pydantic.Field(default="0.0.0.0", validation_alias="UVICORN_HOST")
    port: int = pydantic.Field(default=3001, validation_alias="UVICORN_PORT")
    environment: str = pydantic.Field(default="development", validation_alias="ENVIRONMENT")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


class BrowserSettings(pydantic_settings.BaseSettings):
    """Browser launch configuration.

    Attributes:
        headless: Run Chromium without a visible window.
        channel: Browser channel such as ``chrome``; empty for bundled Chromium.
        launch_timeout_ms: Maximum time to wait for the browser to start.
    """

    headless: bool = pydantic.Field(default=True, validation_alias="BROWSER_HEADLESS")
    channel: str = pydantic.Field(default="", validation_alias="BROWSER_CHANNEL")
    launch_timeout_ms: float = pydantic.Field(default=30000, validation_alias="BROWSER_LAUNCH_TIMEOUT_MS")


class MeasurementDefaults(pydantic_settings.BaseSettings):
    """Global measurement config seeded from ``WEBPAGE_IMPACT_*`` variables."""

    timeout: float | None = pydantic.Field(default=None, validation_alias="WEBPAGE_IMPACT_TIMEOUT")
    mobile_device: str | None = pydantic.Field(default=None, validation_alias="WEBPAGE_IMPACT_MOBILE_DEVICE")
    emulate_network_conditions: str | None = pydantic.Field(
        default=None, validation_alias="WEBPAGE_IMPACT_NETWORK_CONDITIONS"
    )
    scroll_to_bottom: bool | None = pydantic.Field(default=None, validation_alias="WEBPAGE_IMPACT_SCROLL_TO_BOTTOM")
    lighthouse: bool | None = pydantic.Field(default=None, validation_alias="WEBPAGE_IMPACT_LIGHTHOUSE")

    def to_config_dict(self) -> dict[str, Any]:
        """Return only the values that were actually set."""
        return self.model_dump(exclude_none=True)
