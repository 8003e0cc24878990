"""
Browser session management for concurrent measurement support.
Each BrowserSession owns its own Playwright instance, browser, context
and page, so several URLs can be measured in parallel without sharing
any browser state.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator

from playwright import async_api

from webpage_impact import settings
from webpage_impact.browser import device_configs, network_conditions
from webpage_impact.models import config as config_mod
from webpage_impact.utils import errors, logger

log = logger.create_logger("BrowserSession")


class BrowserSession:
    """
    Manages an isolated browser session for a single URL measurement.
    """

    def __init__(self, browser_settings: settings.BrowserSettings | None = None) -> None:
        """Initialise an unlaunched session."""
        self._settings = browser_settings or settings.BrowserSettings()
        self._playwright: async_api.Playwright | None = None
        self._browser: async_api.Browser | None = None
        self._context: async_api.BrowserContext | None = None
        self._page: async_api.Page | None = None
        # Kept attached for the page lifetime; throttling ends when it detaches.
        self._emulation_session: async_api.CDPSession | None = None

    @property
    def page(self) -> async_api.Page:
        """Return the active page, raising if the browser is not launched."""
        if not self._page:
            raise RuntimeError("No browser session active")
        return self._page

    # ==========================================================================
    # Browser Lifecycle
    # ==========================================================================

    async def launch(self, measurement_config: config_mod.MeasurementConfig) -> async_api.Page:
        """Launch Chromium and prepare a page according to *measurement_config*."""
        log.info("Launching browser", {
            "headless": self._settings.headless,
            "device": measurement_config.mobile_device,
            "network": measurement_config.emulate_network_conditions,
        })

        self._playwright = await async_api.async_playwright().start()
        launch_kwargs: dict[str, object] = {
            "headless": self._settings.headless,
            "timeout": self._settings.launch_timeout_ms,
        }
        if self._settings.channel:
            launch_kwargs["channel"] = self._settings.channel
        self._browser = await self._playwright.chromium.launch(**launch_kwargs)  # type: ignore[arg-type]

        context_kwargs: dict[str, object] = {}
        if measurement_config.mobile_device:
            device = device_configs.DEVICE_CONFIGS[measurement_config.mobile_device]
            context_kwargs.update(
                user_agent=device.user_agent,
                viewport={"width": device.viewport.width, "height": device.viewport.height},
                device_scale_factor=device.device_scale_factor,
                is_mobile=device.is_mobile,
                has_touch=device.has_touch,
            )
        if measurement_config.headers:
            # Extra headers rather than request routing: routing disables the HTTP cache.
            extra_headers = measurement_config.headers.to_http_headers()
            if extra_headers:
                context_kwargs["extra_http_headers"] = extra_headers
        self._context = await self._browser.new_context(**context_kwargs)  # type: ignore[arg-type]

        self._page = await self._context.new_page()
        if measurement_config.timeout is not None:
            self._page.set_default_navigation_timeout(measurement_config.timeout)

        if measurement_config.emulate_network_conditions:
            conditions = network_conditions.NETWORK_CONDITIONS[measurement_config.emulate_network_conditions]
            self._emulation_session = await self._context.new_cdp_session(self._page)
            await self._emulation_session.send("Network.enable")
            await self._emulation_session.send("Network.emulateNetworkConditions", conditions.to_cdp_params())

        log.debug("Browser launched", {"contextOptions": list(context_kwargs)})
        return self._page

    # ==========================================================================
    # Cleanup
    # ==========================================================================

    async def close(self) -> None:
        """Close the browser and clean up all resources; close errors are not raised."""
        log.debug("Closing browser session")
        self._page = None

        if self._emulation_session:
            try:
                await self._emulation_session.detach()
            except Exception as exc:
                log.debug("Emulation session detach error (non-fatal)", {"error": errors.get_error_message(exc)})
            self._emulation_session = None

        if self._context:
            try:
                await self._context.close()
            except Exception as exc:
                log.debug("Context close error (non-fatal)", {"error": errors.get_error_message(exc)})
            self._context = None

        if self._browser:
            try:
                await self._browser.close()
            except Exception as exc:
                log.debug("Browser close error (non-fatal)", {"error": errors.get_error_message(exc)})
            self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as exc:
                log.debug("Playwright stop error (non-fatal)", {"error": errors.get_error_message(exc)})
            self._playwright = None

        log.debug("Browser session closed")


@contextlib.asynccontextmanager
async def open_browser_session(
    measurement_config: config_mod.MeasurementConfig,
    browser_settings: settings.BrowserSettings | None = None,
) -> AsyncIterator[BrowserSession]:
    """Launch a session for the duration of the block; it is always closed."""
    session = BrowserSession(browser_settings)
    try:
        await session.launch(measurement_config)
        yield session
    finally:
        await session.close()
