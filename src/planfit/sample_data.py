"""Synthetic sample generation for demos and tests.

Produces one analysis unit per asset, metric and planning month, with
samples shaped like noisy equipment delay / availability history.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from . import catalog
from .analysis import create_unit
from .models import AnalysisUnit

SAMPLES_PER_UNIT = 50
EMPTY_UNIT_PROBABILITY = 0.05
HIGH_VARIANCE_PROBABILITY = 0.1
HIGH_VARIANCE_FACTOR = 3.0
LOGNORMAL_PROBABILITY = 0.3
LOGNORMAL_SIGMA = 0.2
SPIKE_PROBABILITY = 0.05
SPIKE_FACTORS = (2.5, 0.1)
PLAN_DEVIATION = 0.2


def period_labels(start: Union[str, date, pd.Timestamp], months: int) -> List[str]:
    """Month labels such as ``"Jan 2024"`` starting at the month of ``start``."""

    if months <= 0:
        return []
    first = pd.Timestamp(start).to_period("M").to_timestamp()
    return [stamp.strftime("%b %Y") for stamp in pd.date_range(first, periods=months, freq="MS")]


def generate_samples(
    rng: np.random.Generator,
    base_mean: float,
    base_std: float,
    count: int = SAMPLES_PER_UNIT,
    lognormal: bool = False,
) -> List[float]:
    if count <= 0:
        return []
    z = rng.standard_normal(count)
    if lognormal:
        values = np.exp(np.log(base_mean) + z * LOGNORMAL_SIGMA)
    else:
        values = z * base_std + base_mean
    spiked = rng.random(count) < SPIKE_PROBABILITY
    factors = np.where(rng.random(count) > 0.5, SPIKE_FACTORS[0], SPIKE_FACTORS[1])
    values = np.where(spiked, values * factors, values)
    values = np.clip(values, 0.0, None)
    return np.round(values, 2).tolist()


def generate_analysis_units(
    asset_ids: Optional[Sequence[str]] = None,
    metric_ids: Optional[Sequence[str]] = None,
    start: Union[str, date, pd.Timestamp] = "2024-01-01",
    months: int = 12,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> List[AnalysisUnit]:
    """Generate synthetic analysis units for every asset/metric/month.

    Pass ``seed`` (or an explicit ``rng``) for reproducible output.
    """

    generator = rng if rng is not None else np.random.default_rng(seed)
    assets = list(asset_ids) if asset_ids is not None else catalog.asset_ids()
    metrics = list(metric_ids) if metric_ids is not None else catalog.metric_ids()
    labels = period_labels(start, months)

    units: List[AnalysisUnit] = []
    for asset_id in assets:
        for metric_id in metrics:
            base_mean, base_std = catalog.baseline_for_metric(catalog.metric_name(metric_id))
            for index, label in enumerate(labels):
                empty = generator.random() < EMPTY_UNIT_PROBABILITY
                high_variance = generator.random() < HIGH_VARIANCE_PROBABILITY
                lognormal = generator.random() < LOGNORMAL_PROBABILITY
                std = base_std * HIGH_VARIANCE_FACTOR if high_variance else base_std
                count = 0 if empty else SAMPLES_PER_UNIT
                samples = generate_samples(generator, base_mean, std, count, lognormal)

                deviation = generator.random() * 2 * PLAN_DEVIATION - PLAN_DEVIATION
                if samples:
                    mean = float(np.mean(samples))
                    planned_p50 = mean * (1 + deviation)
                    spread = None
                else:
                    planned_p50 = base_mean
                    spread = base_std

                units.append(
                    create_unit(
                        f"{asset_id}-{metric_id}-{index}",
                        samples,
                        planned_p50=planned_p50,
                        planned_spread=spread,
                        asset_id=asset_id,
                        metric_id=metric_id,
                        period_index=index,
                        label=label,
                    )
                )
    return units


__all__ = ["generate_analysis_units", "generate_samples", "period_labels"]
