from __future__ import annotations

import math
from typing import Dict, Iterable

import numpy as np

from .distributions import evaluate_pdf
from .models import DistributionFamily, DistributionParams, as_family
from .stats import as_sample_array, bucket_counts

MIN_FIT_SAMPLES = 5
MIN_FIT_BUCKETS = 5
MAX_FIT_BUCKETS = 20

FAMILY_ORDER = (
    DistributionFamily.NORMAL,
    DistributionFamily.LOGNORMAL,
    DistributionFamily.TRIANGULAR,
    DistributionFamily.PERT,
    DistributionFamily.WEIBULL,
)


def score_fit(samples: Iterable[float], params: DistributionParams, family: object) -> float:
    """
    Coefficient-of-determination style score of ``family`` against ``samples``.

    The samples are binned into ``clamp(floor(sqrt(N)), 5, 20)`` equal-width
    buckets over ``[params.min, params.max]`` and normalised to a density.
    The candidate PDF is evaluated at each bucket midpoint and the score is
    ``1 - ss_res / ss_tot`` clamped to ``[0, 1]``.

    Returns ``0`` for fewer than five samples, a zero-width range, or a
    perfectly flat histogram.
    """

    kind = as_family(family)
    data = as_sample_array(samples)
    if data.size < MIN_FIT_SAMPLES:
        return 0.0
    span = params.max - params.min
    if span <= 0:
        return 0.0

    bucket_count = min(MAX_FIT_BUCKETS, max(MIN_FIT_BUCKETS, int(math.floor(math.sqrt(data.size)))))
    width = span / bucket_count
    counts = bucket_counts(data, params.min, width, bucket_count)
    empirical = counts / (data.size * width)
    midpoints = params.min + (np.arange(bucket_count) + 0.5) * width
    fitted = np.asarray(evaluate_pdf(kind, midpoints, params), dtype=float)

    ss_res = float(np.sum((empirical - fitted) ** 2))
    ss_tot = float(np.sum((empirical - empirical.mean()) ** 2))
    if ss_tot == 0:
        return 0.0
    return float(np.clip(1 - ss_res / ss_tot, 0.0, 1.0))


def fit_scores(samples: Iterable[float], params: DistributionParams) -> Dict[DistributionFamily, float]:
    data = as_sample_array(samples)
    return {family: score_fit(data, params, family) for family in FAMILY_ORDER}


def select_best_fit(samples: Iterable[float], params: DistributionParams) -> DistributionFamily:
    """Highest-scoring family; ties keep the earlier family in ``FAMILY_ORDER``.

    Fewer than five samples default to ``Normal`` without scoring.
    """

    data = as_sample_array(samples)
    if data.size < MIN_FIT_SAMPLES:
        return DistributionFamily.NORMAL

    best = DistributionFamily.NORMAL
    best_score = -math.inf
    for family, score in fit_scores(data, params).items():
        if score > best_score:
            best, best_score = family, score
    return best


__all__ = ["FAMILY_ORDER", "fit_scores", "score_fit", "select_best_fit"]
