"""
Predefined network throttling profiles.

Throughput values are bytes per second and latency is milliseconds,
matching the DevTools throttling presets of the same names.
"""

from __future__ import annotations

from webpage_impact.models.browser import NetworkConditions

NETWORK_CONDITIONS: dict[str, NetworkConditions] = {
    "Slow 3G": NetworkConditions(
        download=((500 * 1000) / 8) * 0.8,
        upload=((500 * 1000) / 8) * 0.8,
        latency=400 * 5,
    ),
    "Fast 3G": NetworkConditions(
        download=((1.6 * 1000 * 1000) / 8) * 0.9,
        upload=((750 * 1000) / 8) * 0.9,
        latency=150 * 3.75,
    ),
    "Slow 4G": NetworkConditions(
        download=((1.6 * 1000 * 1000) / 8) * 0.9,
        upload=((750 * 1000) / 8) * 0.9,
        latency=150 * 3.75,
    ),
    "Fast 4G": NetworkConditions(
        download=((9 * 1000 * 1000) / 8) * 0.9,
        upload=((1.5 * 1000 * 1000) / 8) * 0.9,
        latency=60 * 2.75,
    ),
}
