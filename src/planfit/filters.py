"""
Outlier filtering for raw sample sets.

Three stages always run in the same order, each on the survivors of the
previous one:

1. absolute bounds (``absolute_min`` / ``absolute_max``)
2. sigma clipping around the mean of the surviving set
3. tail trimming of the sorted surviving set

:func:`apply_filters` returns the kept samples. :func:`audit_exclusions`
walks the same stages without dropping anything and tags each original
sample with the stage that excluded it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .models import FilterConfig, setting_or_zero
from .stats import as_sample_array

# Sigma clipping needs a spread estimate from more than two points.
MIN_SIGMA_SAMPLES = 3


class ExclusionReason(str, Enum):
    LIMIT = "Limit"
    SIGMA = "Sigma"
    TAIL = "Tail"


@dataclass(frozen=True)
class SampleAudit:
    index: int
    value: float
    reason: Optional[ExclusionReason] = None

    @property
    def excluded(self) -> bool:
        return self.reason is not None


def _within_absolute_bounds(values: np.ndarray, config: FilterConfig) -> np.ndarray:
    mask = np.ones(values.shape, dtype=bool)
    if config.has_absolute_min:
        mask &= values >= config.absolute_min
    if config.has_absolute_max:
        mask &= values <= config.absolute_max
    return mask


def _sigma_bounds(values: np.ndarray, sigma: float) -> Optional[Tuple[float, float]]:
    sigma = setting_or_zero(sigma)
    if sigma <= 0 or values.size < MIN_SIGMA_SAMPLES:
        return None
    mean = float(values.sum() / values.size)
    std_dev = float(np.sqrt(np.mean((values - mean) ** 2)))
    return mean - sigma * std_dev, mean + sigma * std_dev


def _tail_counts(size: int, bottom_pct: float, top_pct: float) -> Optional[Tuple[int, int]]:
    """Return ``(remove_bottom, remove_top)`` or ``None`` when trimming must be skipped."""

    if size == 0:
        return None
    remove_bottom = max(0, int(math.floor(size * setting_or_zero(bottom_pct) / 100)))
    remove_top = max(0, int(math.floor(size * setting_or_zero(top_pct) / 100)))
    if remove_bottom + remove_top >= size:
        return None
    return remove_bottom, remove_top


def apply_absolute_bounds(values: np.ndarray, config: FilterConfig) -> np.ndarray:
    return values[_within_absolute_bounds(values, config)]


def apply_sigma_clip(values: np.ndarray, config: FilterConfig) -> np.ndarray:
    bounds = _sigma_bounds(values, config.sigma_filter)
    if bounds is None:
        return values
    lower, upper = bounds
    return values[(values >= lower) & (values <= upper)]


def apply_tail_trim(values: np.ndarray, config: FilterConfig) -> np.ndarray:
    ordered = np.sort(values, kind="stable")
    counts = _tail_counts(ordered.size, config.trim_bottom_pct, config.trim_top_pct)
    if counts is None:
        return ordered
    remove_bottom, remove_top = counts
    return ordered[remove_bottom : ordered.size - remove_top]


FILTER_STAGES: Sequence[Callable[[np.ndarray, FilterConfig], np.ndarray]] = (
    apply_absolute_bounds,
    apply_sigma_clip,
    apply_tail_trim,
)


def apply_filters(samples: Iterable[float], config: FilterConfig) -> List[float]:
    """Run every filter stage over ``samples`` and return the kept values, sorted."""

    values = as_sample_array(samples).copy()
    for stage in FILTER_STAGES:
        values = stage(values, config)
    return values.tolist()


def audit_exclusions(samples: Iterable[float], config: FilterConfig) -> List[SampleAudit]:
    """Tag every sample with the stage that would exclude it, if any."""

    values = as_sample_array(samples)
    reasons: List[Optional[ExclusionReason]] = [None] * values.size

    outside = ~_within_absolute_bounds(values, config)
    for idx in np.flatnonzero(outside):
        reasons[idx] = ExclusionReason.LIMIT

    surviving = np.flatnonzero(~outside)
    bounds = _sigma_bounds(values[surviving], config.sigma_filter)
    if bounds is not None:
        lower, upper = bounds
        for idx in surviving:
            if values[idx] < lower or values[idx] > upper:
                reasons[idx] = ExclusionReason.SIGMA

    surviving = np.array([idx for idx in range(values.size) if reasons[idx] is None], dtype=int)
    counts = _tail_counts(surviving.size, config.trim_bottom_pct, config.trim_top_pct)
    if counts is not None:
        remove_bottom, remove_top = counts
        ranked = surviving[np.argsort(values[surviving], kind="stable")]
        trimmed = list(ranked[:remove_bottom]) + list(ranked[ranked.size - remove_top :])
        for idx in trimmed:
            reasons[idx] = ExclusionReason.TAIL

    return [
        SampleAudit(index=idx, value=float(values[idx]), reason=reasons[idx])
        for idx in range(values.size)
    ]


def audit_frame(samples: Iterable[float], config: FilterConfig) -> pd.DataFrame:
    """Tabular form of :func:`audit_exclusions` for display and export."""

    rows = [
        {
            "index": entry.index,
            "value": entry.value,
            "excluded": entry.excluded,
            "reason": entry.reason.value if entry.reason is not None else "",
        }
        for entry in audit_exclusions(samples, config)
    ]
    return pd.DataFrame(rows, columns=["index", "value", "excluded", "reason"])


__all__ = [
    "ExclusionReason",
    "FILTER_STAGES",
    "SampleAudit",
    "apply_absolute_bounds",
    "apply_filters",
    "apply_sigma_clip",
    "apply_tail_trim",
    "audit_exclusions",
    "audit_frame",
]
