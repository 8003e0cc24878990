"""
Run orchestrator: measure page weight and reload data ratio for a batch of URLs.

For each input URL a dedicated browser session is opened, the page is
loaded once with the cache disabled and then reloaded with the cache
enabled, and the two resource snapshots are reduced to metrics.  URLs
are measured concurrently; a failing URL produces an ``error`` field in
its own output and never affects the others.
"""

from __future__ import annotations

import asyncio
import dataclasses
from collections.abc import Callable
from typing import Any

from webpage_impact import settings
from webpage_impact.browser import session as browser_session
from webpage_impact.measurement import diagnostics as diagnostics_mod
from webpage_impact.measurement import metrics, recorder
from webpage_impact.models import config as config_mod
from webpage_impact.models.resources import MetricsResult, PageLoadOptions
from webpage_impact.pipeline import lighthouse
from webpage_impact.utils import errors, logger
from webpage_impact.utils import url as url_mod

log = logger.create_logger("WebpageImpact")

_error = errors.build_error_message("WebpageImpact")

# Output keys understood by downstream reporting.
PAGE_WEIGHT_KEY = "network/data/bytes"
RESOURCE_WEIGHTS_KEY = "network/data/resources/bytes"
LIGHTHOUSE_REPORT_KEY = "lighthouse-report"

ProgressCallback = Callable[[str, str, int], None]


@dataclasses.dataclass(frozen=True)
class MeasurementResult:
    """Metrics for one URL plus the raw Lighthouse report, if one was requested."""

    metrics: MetricsResult
    lighthouse_report: str | None = None


def _noop_progress(_step: str, _message: str, _progress: int) -> None:
    return None


async def measure_page_impact_metrics(
    url: str,
    measurement_config: config_mod.MeasurementConfig,
    diagnostics: diagnostics_mod.Diagnostics | None = None,
    browser_settings: settings.BrowserSettings | None = None,
    on_progress: ProgressCallback | None = None,
) -> MeasurementResult:
    """Measure one URL: initial load, reload, optional audit, metrics.

    Raises:
        errors.MeasurementError: One wrapped, descriptive error for the URL.
    """
    sink = diagnostics or diagnostics_mod.default_diagnostics()
    progress = on_progress or _noop_progress
    scroll = bool(measurement_config.scroll_to_bottom)
    skip_bodyless = bool(measurement_config.skip_bodyless_responses)

    try:
        progress("browser", "Launching browser...", 10)
        async with browser_session.open_browser_session(measurement_config, browser_settings) as session:
            progress("initial-load", "Loading page with cache disabled...", 25)
            log.start_timer("initial-load")
            initial = await recorder.load_page_resources(
                session.page,
                url,
                PageLoadOptions(
                    reload=False, cache_enabled=False, scroll_to_bottom=scroll, skip_bodyless_responses=skip_bodyless
                ),
                sink,
            )
            log.end_timer("initial-load", "Initial load captured")

            progress("reload", "Reloading page with cache enabled...", 55)
            log.start_timer("reload")
            reloaded = await recorder.load_page_resources(
                session.page,
                url,
                PageLoadOptions(
                    reload=True, cache_enabled=True, scroll_to_bottom=scroll, skip_bodyless_responses=skip_bodyless
                ),
                sink,
            )
            log.end_timer("reload", "Reload captured")

            report: str | None = None
            if measurement_config.lighthouse:
                progress("audit", "Running Lighthouse audit...", 75)
                report = await lighthouse.run_lighthouse(url, measurement_config)
    except errors.MeasurementError:
        raise
    except Exception as exc:
        raise errors.MeasurementError(
            _error(f"Error during measurement of webpage impact metrics: {errors.get_error_message(exc)}")
        ) from exc

    progress("metrics", "Computing metrics...", 90)
    result = metrics.compute_metrics(
        initial.resources,
        reloaded.resources,
        measurement_config.supplied_data_reload_ratio,
        sink,
    )
    log.info("Metrics computed", {
        "url": url,
        "pageWeight": result.page_weight,
        "dataReloadRatio": result.data_reload_ratio,
        "initialResources": len(initial.resources),
        "reloadResources": len(reloaded.resources),
    })
    return MeasurementResult(metrics=result, lighthouse_report=report)


def build_output(
    raw_input: dict[str, Any],
    result: MetricsResult,
    report_path: str | None = None,
) -> dict[str, Any]:
    """Merge metrics into the input row using the reporting keys."""
    output: dict[str, Any] = {
        **raw_input,
        PAGE_WEIGHT_KEY: result.page_weight,
        RESOURCE_WEIGHTS_KEY: dict(result.resource_type_weights),
    }
    if report_path:
        output[LIGHTHOUSE_REPORT_KEY] = report_path
    if raw_input.get("options") or result.data_reload_ratio is not None:
        output["options"] = {
            **(raw_input.get("options") or {}),
            "dataReloadRatio": result.data_reload_ratio,
        }
    return output


class WebpageImpact:
    """Measures webpage network footprint for batches of input rows."""

    def __init__(
        self,
        global_config: dict[str, Any] | None = None,
        browser_settings: settings.BrowserSettings | None = None,
    ) -> None:
        self._global_config = global_config
        self._browser_settings = browser_settings

    def resolve_config(self, config: dict[str, Any] | None = None) -> config_mod.MeasurementConfig:
        """Validate the global and per-call configs and merge them."""
        return config_mod.merge_configs(
            config_mod.validate_config(self._global_config),
            config_mod.validate_config(config),
        )

    async def execute(
        self,
        inputs: list[dict[str, Any]],
        config: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Measure every input concurrently and return one output row per input.

        Raises:
            config_mod.ConfigValidationError: The config or an input row is malformed.
        """
        measurement_config = self.resolve_config(config)
        validated = [config_mod.validate_input(raw) for raw in inputs]
        return list(
            await asyncio.gather(
                *(
                    self._execute_single(raw, item, measurement_config)
                    for raw, item in zip(inputs, validated)
                )
            )
        )

    async def _execute_single(
        self,
        raw_input: dict[str, Any],
        item: config_mod.MeasurementInput,
        measurement_config: config_mod.MeasurementConfig,
    ) -> dict[str, Any]:
        logger.start_log_file(url_mod.extract_domain(item.url))
        log.section(f"Measuring: {item.url}")
        log.start_timer("measurement")
        try:
            result = await measure_page_impact_metrics(
                item.url, measurement_config, browser_settings=self._browser_settings
            )
            report_path = None
            if result.lighthouse_report is not None:
                timestamp = raw_input.get("timer/start") or item.timestamp
                try:
                    report_path = lighthouse.write_report_to_file(
                        result.lighthouse_report, item.url, str(timestamp) if timestamp else None
                    )
                except OSError as exc:
                    log.warn("Failed to write Lighthouse report", {"url": item.url, "error": str(exc)})
            log.end_timer("measurement", "Measurement complete")
            return build_output(raw_input, result.metrics, report_path)
        except errors.MeasurementError as exc:
            log.error("Measurement failed", {"url": item.url, "error": str(exc)})
            return {**raw_input, "error": str(exc)}
        finally:
            logger.end_log_file()
