"""
Lifecycle operations for :class:`~planfit.models.AnalysisUnit`.

Every function returns a new unit; nothing here keeps state between calls.
Whenever the filter configuration changes the whole pipeline runs again
(filter, statistics, best fit, status) so the derived fields never drift
apart. The planning P-values are only ever changed by the caller.
"""

from __future__ import annotations

import logging
import math
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .filters import apply_filters
from .fit import fit_scores, score_fit, select_best_fit
from .models import (
    AnalysisUnit,
    DistributionChoice,
    DistributionFamily,
    FilterConfig,
    as_choice,
)
from .stats import as_sample_array, compute_distribution
from .status import evaluate_status

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _round_plan(value: float) -> float:
    return round(float(value), 2)


def _to_plan_value(value: object) -> float:
    """Numbers pass through; text is read up to its first non-numeric character.

    ``"12abc"`` becomes ``12.0``. Text with no leading number, and NaN, become ``0.0``.
    """

    if isinstance(value, (int, float)):
        numeric = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value).strip())
        if match is None:
            return 0.0
        numeric = float(match.group(0))
    if math.isnan(numeric):
        return 0.0
    return numeric


def create_unit(
    unit_id: str,
    samples: Iterable[float],
    planned_p50: Optional[float] = None,
    planned_spread: Optional[float] = None,
    *,
    asset_id: str = "",
    metric_id: str = "",
    period_index: int = 0,
    label: str = "",
) -> AnalysisUnit:
    """Build a unit from raw samples with no filtering applied.

    ``planned_p50`` defaults to the sample mean and ``planned_spread`` (the
    P50 to P10/P90 distance) to the sample standard deviation.
    """

    raw = tuple(as_sample_array(samples).tolist())
    distribution = compute_distribution(raw)
    best_fit = select_best_fit(raw, distribution)
    p50 = distribution.mean if planned_p50 is None else float(planned_p50)
    spread = distribution.std_dev if planned_spread is None else float(planned_spread)
    result = evaluate_status(distribution, p50, len(raw))
    return AnalysisUnit(
        unit_id=unit_id,
        raw_samples=raw,
        filtered_samples=raw,
        distribution=distribution,
        best_fit=best_fit,
        planned_p10=_round_plan(p50 - spread),
        planned_p50=_round_plan(p50),
        planned_p90=_round_plan(p50 + spread),
        status=result.status,
        status_message=result.message,
        asset_id=asset_id,
        metric_id=metric_id,
        period_index=period_index,
        label=label,
    )


def recompute_with_filter(
    unit: AnalysisUnit,
    partial: Union[Mapping[str, object], FilterConfig, None] = None,
    **overrides: object,
) -> AnalysisUnit:
    """Merge a partial filter config onto ``unit`` and rerun the pipeline.

    A full :class:`FilterConfig` replaces the unit's settings outright.
    Status is re-evaluated against the unit's existing planned P50.
    """

    if isinstance(partial, FilterConfig):
        config = partial.merged(overrides)
    else:
        config = unit.filter_config.merged(partial, **overrides)
    filtered = tuple(apply_filters(unit.raw_samples, config))
    distribution = compute_distribution(filtered)
    best_fit = select_best_fit(filtered, distribution)
    result = evaluate_status(distribution, unit.planned_p50, len(filtered))
    logger.debug(
        "Recomputed %s: kept %d of %d samples, best fit %s, status %s",
        unit.unit_id,
        len(filtered),
        len(unit.raw_samples),
        best_fit.value,
        result.status.value,
    )
    return replace(
        unit,
        filter_config=config,
        filtered_samples=filtered,
        distribution=distribution,
        best_fit=best_fit,
        status=result.status,
        status_message=result.message,
    )


def select_distribution(unit: AnalysisUnit, choice: object) -> AnalysisUnit:
    return replace(unit, selected_distribution=as_choice(choice))


def active_family(unit: AnalysisUnit) -> DistributionFamily:
    """The family in effect for ``unit``: the override, or the best fit for ``Auto``."""

    return unit.selected_distribution.resolve(unit.best_fit)


def set_planned_values(
    unit: AnalysisUnit,
    p10: object = None,
    p50: object = None,
    p90: object = None,
) -> AnalysisUnit:
    """Edit planning values; unparseable input becomes ``0.0``.

    A new P50 re-runs the status check on the current distribution.
    """

    changes: Dict[str, object] = {}
    if p10 is not None:
        changes["planned_p10"] = _to_plan_value(p10)
    if p90 is not None:
        changes["planned_p90"] = _to_plan_value(p90)
    if p50 is not None:
        target = _to_plan_value(p50)
        result = evaluate_status(unit.distribution, target, len(unit.filtered_samples))
        changes.update(planned_p50=target, status=result.status, status_message=result.message)
    return replace(unit, **changes)


def set_ignored(unit: AnalysisUnit, ignored: bool = True) -> AnalysisUnit:
    return replace(unit, ignored=bool(ignored))


def toggle_ignored(unit: AnalysisUnit) -> AnalysisUnit:
    return replace(unit, ignored=not unit.ignored)


def unit_fit_score(unit: AnalysisUnit) -> float:
    return score_fit(unit.filtered_samples, unit.distribution, active_family(unit))


def unit_fit_scores(unit: AnalysisUnit) -> Dict[DistributionFamily, float]:
    return fit_scores(unit.filtered_samples, unit.distribution)


def apply_global_settings(
    units: Sequence[AnalysisUnit],
    filter_config: FilterConfig,
    distribution: object = DistributionChoice.AUTO,
    *,
    max_workers: Optional[int] = None,
) -> List[AnalysisUnit]:
    """Apply one filter configuration and distribution choice to every unit.

    The full ``filter_config`` replaces each unit's settings. Units are
    independent, so with ``max_workers`` they are recomputed on a thread
    pool; the result is returned in input order either way.
    """

    choice = as_choice(distribution)

    def _apply(unit: AnalysisUnit) -> AnalysisUnit:
        return recompute_with_filter(replace(unit, selected_distribution=choice), filter_config)

    if max_workers and max_workers > 1 and len(units) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            updated = list(pool.map(_apply, units))
    else:
        updated = [_apply(unit) for unit in units]
    logger.debug("Applied global settings to %d units", len(updated))
    return updated


__all__ = [
    "active_family",
    "apply_global_settings",
    "create_unit",
    "recompute_with_filter",
    "select_distribution",
    "set_ignored",
    "set_planned_values",
    "toggle_ignored",
    "unit_fit_score",
    "unit_fit_scores",
]
