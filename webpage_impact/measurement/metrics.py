"""
Page weight and reload data ratio computed from two resource snapshots.

Pure functions; no browser access.  All weights are integer byte counts.

The reload data ratio combines two cache signals:

- bytes present in the initial load but missing from the reload are
  assumed to have been served from a cache the page API never reports
  (``assume_from_cache``);
- bytes on reload responses explicitly flagged as cached
  (``browser_cache_on_reload``).

Neither signal is sufficient alone; cache flags undercount resources
Chrome serves from disk without marking them.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from webpage_impact.measurement import diagnostics as diagnostics_mod
from webpage_impact.models.resources import MetricsResult, Resource, ResourceKind


def compute_resource_type_weights(resources: Iterable[Resource]) -> dict[ResourceKind, int]:
    """Sum transfer sizes per resource type."""
    weights: dict[ResourceKind, int] = {}
    for resource in resources:
        weights[resource.type] = weights.get(resource.type, 0) + resource.transfer_size
    return weights


def _cached_weight(resources: Iterable[Resource]) -> int:
    return sum(r.transfer_size for r in resources if r.from_cache)


def compute_data_reload_ratio(
    initial_resources: Sequence[Resource],
    reload_resources: Sequence[Resource],
    diagnostics: diagnostics_mod.Diagnostics | None = None,
) -> float:
    """Estimate the fraction of page bytes re-fetched on a repeat visit.

    Returns 1.0 for an empty initial load.  The result is not clamped:
    it exceeds 1.0 when the reload transferred more uncached bytes
    than the whole initial load.
    """
    sink = diagnostics or diagnostics_mod.default_diagnostics()
    page_weight = sum(r.transfer_size for r in initial_resources)

    initial_cache_weight = _cached_weight(initial_resources)
    if initial_cache_weight > 0:
        sink.warn(
            "Initial page load contained resources from cache",
            {"initialCacheWeight": initial_cache_weight},
        )

    if page_weight == 0:
        return 1.0

    reload_page_weight = sum(r.transfer_size for r in reload_resources)
    assume_from_cache = page_weight - reload_page_weight
    browser_cache_on_reload = _cached_weight(reload_resources)
    assumed_cache_weight = assume_from_cache + browser_cache_on_reload

    return (page_weight - assumed_cache_weight) / page_weight


def compute_metrics(
    initial_resources: Sequence[Resource],
    reload_resources: Sequence[Resource],
    data_reload_ratio: float | None = None,
    diagnostics: diagnostics_mod.Diagnostics | None = None,
) -> MetricsResult:
    """Compute page weight, per-type weights and the reload data ratio.

    Args:
        initial_resources: Resources from the cold (cache disabled) load.
        reload_resources: Resources from the warm (cache enabled) reload.
        data_reload_ratio: A ratio supplied by the caller; when given it
            is passed through unchanged and nothing is recomputed.
        diagnostics: Sink for non-fatal findings.

    Returns:
        The derived metrics.
    """
    resource_type_weights = compute_resource_type_weights(initial_resources)
    page_weight = sum(resource_type_weights.values())

    if data_reload_ratio is None:
        data_reload_ratio = compute_data_reload_ratio(
            initial_resources, reload_resources, diagnostics
        )

    return MetricsResult(
        page_weight=page_weight,
        resource_type_weights=resource_type_weights,
        data_reload_ratio=data_reload_ratio,
    )
