"""
Optional Lighthouse audit, run as an external CLI process.

The audit itself is entirely Lighthouse's; this module only launches the
``lighthouse`` binary, collects its HTML report and writes it to disk.
Lighthouse drives its own Chrome instance, so the measurement's device
profile and header overrides are forwarded as CLI flags.  Network
throttling presets are not forwarded; Lighthouse applies its own.
"""

from __future__ import annotations

import asyncio
import json
import os
import pathlib

from webpage_impact.browser import device_configs
from webpage_impact.models import config as config_mod
from webpage_impact.utils import logger
from webpage_impact.utils import url as url_mod

log = logger.create_logger("Lighthouse")

LIGHTHOUSE_BIN = os.environ.get("LIGHTHOUSE_BIN", "lighthouse")


class LighthouseError(RuntimeError):
    """The Lighthouse CLI could not be started or exited with an error."""


def build_lighthouse_args(
    url: str,
    measurement_config: config_mod.MeasurementConfig | None = None,
) -> list[str]:
    """Return the CLI arguments auditing *url* under *measurement_config*."""
    args = [
        url,
        "--output=html",
        "--output-path=stdout",
        "--quiet",
        "--chrome-flags=--headless=new",
    ]
    if measurement_config is None:
        return args

    if measurement_config.mobile_device:
        device = device_configs.DEVICE_CONFIGS[measurement_config.mobile_device]
        args += [
            f"--form-factor={'mobile' if device.is_mobile else 'desktop'}",
            f"--screenEmulation.mobile={str(device.is_mobile).lower()}",
            f"--screenEmulation.width={device.viewport.width}",
            f"--screenEmulation.height={device.viewport.height}",
            f"--screenEmulation.deviceScaleFactor={device.device_scale_factor}",
            f"--emulatedUserAgent={device.user_agent}",
        ]
    if measurement_config.headers:
        headers = measurement_config.headers.to_http_headers()
        if headers:
            args.append(f"--extra-headers={json.dumps(headers)}")
    return args


async def run_lighthouse(
    url: str,
    measurement_config: config_mod.MeasurementConfig | None = None,
    binary: str = LIGHTHOUSE_BIN,
) -> str:
    """Audit *url* with the Lighthouse CLI and return the HTML report."""
    try:
        process = await asyncio.create_subprocess_exec(
            binary,
            *build_lighthouse_args(url, measurement_config),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        raise LighthouseError(f"Lighthouse binary not found: {binary}") from exc

    log.start_timer("lighthouse")
    try:
        stdout, stderr = await process.communicate()
    finally:
        log.end_timer("lighthouse", "Lighthouse audit finished")
    if process.returncode != 0:
        detail = stderr.decode("utf-8", errors="replace").strip().splitlines()
        raise LighthouseError(
            f"Lighthouse exited with code {process.returncode}"
            + (f": {detail[-1]}" if detail else "")
        )
    return stdout.decode("utf-8", errors="replace")


def report_file_name(url: str, timestamp: str | None) -> str:
    """Return the escaped report file name for *url* at *timestamp*."""
    return url_mod.escape_file_name(f"lighthouse-report-{url}-{timestamp}.html")


def write_report_to_file(
    report: str | list[str],
    url: str,
    timestamp: str | None,
    directory: pathlib.Path | None = None,
) -> str:
    """Write *report* next to the working directory and return the file path."""
    file_name = report_file_name(url, timestamp)
    path = (directory or pathlib.Path.cwd()) / file_name
    path.write_text(" ".join(report) if isinstance(report, list) else report, encoding="utf-8")
    log.info("Lighthouse report saved", {"path": str(path)})
    return str(path) if directory else file_name
