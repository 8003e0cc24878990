"""
Device profiles available for mobile and desktop emulation.
Keys are the names accepted by the ``mobileDevice`` measurement option.
"""

from __future__ import annotations

from webpage_impact.models.browser import DeviceConfig, ViewportSize

DEVICE_CONFIGS: dict[str, DeviceConfig] = {
    "iPhone 13": DeviceConfig(
        user_agent="Mozilla/5.0 (iPhone; CPU iPhone OS 15_0 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/15.0 Mobile/15E148 Safari/604.1",
        viewport=ViewportSize(width=390, height=844),
        device_scale_factor=3,
        is_mobile=True,
        has_touch=True,
    ),
    "iPhone 15 Pro": DeviceConfig(
        user_agent="Mozilla/5.0 (iPhone; CPU iPhone OS 17_4 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.4 Mobile/15E148 Safari/604.1",
        viewport=ViewportSize(width=393, height=852),
        device_scale_factor=3,
        is_mobile=True,
        has_touch=True,
    ),
    "iPad Pro 11": DeviceConfig(
        user_agent="Mozilla/5.0 (iPad; CPU OS 17_4 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.4 Mobile/15E148 Safari/604.1",
        viewport=ViewportSize(width=834, height=1194),
        device_scale_factor=2,
        is_mobile=True,
        has_touch=True,
    ),
    "Pixel 7": DeviceConfig(
        user_agent="Mozilla/5.0 (Linux; Android 14; Pixel 7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.6261.90 Mobile Safari/537.36",
        viewport=ViewportSize(width=412, height=915),
        device_scale_factor=2.625,
        is_mobile=True,
        has_touch=True,
    ),
    "Galaxy S9+": DeviceConfig(
        user_agent="Mozilla/5.0 (Linux; Android 8.0.0; SM-G965U Build/R16NW) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.6261.90 Mobile Safari/537.36",
        viewport=ViewportSize(width=320, height=658),
        device_scale_factor=4.5,
        is_mobile=True,
        has_touch=True,
    ),
    "Galaxy Tab S4": DeviceConfig(
        user_agent="Mozilla/5.0 (Linux; Android 8.1.0; SM-T837A) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.6261.90 Safari/537.36",
        viewport=ViewportSize(width=712, height=1138),
        device_scale_factor=2.25,
        is_mobile=True,
        has_touch=True,
    ),
    "Desktop Chrome": DeviceConfig(
        user_agent="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
        viewport=ViewportSize(width=1920, height=1080),
        device_scale_factor=1,
        is_mobile=False,
        has_touch=False,
    ),
}
