"""Descriptive statistics for sample sets."""

from __future__ import annotations

import math
from typing import Iterable

import numpy as np

from .models import DistributionParams

# Below this many samples the histogram peak is too noisy to use as a mode.
MIN_MODE_SAMPLES = 5
MIN_MODE_BUCKETS = 5


def as_sample_array(samples: Iterable[float]) -> np.ndarray:
    if isinstance(samples, np.ndarray):
        return samples.astype(float, copy=False).ravel()
    return np.fromiter(samples, dtype=float)


def bucket_counts(values: np.ndarray, lower: float, width: float, count: int) -> np.ndarray:
    """Count ``values`` into ``count`` equal-width buckets starting at ``lower``.

    Indices are clamped to the first/last bucket so values on (or rounding
    just past) the outer edges are never dropped.
    """

    if values.size == 0:
        return np.zeros(count, dtype=int)
    idx = np.floor((values - lower) / width).astype(int)
    idx = np.clip(idx, 0, count - 1)
    return np.bincount(idx, minlength=count)


def histogram_mode(values: Iterable[float], minimum: float, maximum: float) -> float:
    """Midpoint of the most populated histogram bucket over ``[minimum, maximum]``."""

    data = as_sample_array(values)
    if data.size == 0:
        return 0.0
    if data.size < MIN_MODE_SAMPLES:
        return float(data.mean())
    if maximum == minimum:
        return float(minimum)

    bucket_count = max(MIN_MODE_BUCKETS, int(math.floor(math.sqrt(data.size))))
    width = (maximum - minimum) / bucket_count
    counts = bucket_counts(data, minimum, width, bucket_count)
    peak = int(np.argmax(counts))
    mode = minimum + peak * width + width / 2
    return float(min(max(mode, minimum), maximum))


def compute_distribution(samples: Iterable[float]) -> DistributionParams:
    """Return min/mode/max/mean/population std for ``samples``.

    An empty input yields all-zero parameters.
    """

    data = as_sample_array(samples)
    if data.size == 0:
        return DistributionParams()

    ordered = np.sort(data, kind="stable")
    minimum = float(ordered[0])
    maximum = float(ordered[-1])
    mean = float(data.sum() / data.size)
    std_dev = float(np.sqrt(np.mean((data - mean) ** 2)))
    mode = histogram_mode(ordered, minimum, maximum)
    return DistributionParams(min=minimum, mode=mode, max=maximum, mean=mean, std_dev=std_dev)


__all__ = ["as_sample_array", "bucket_counts", "compute_distribution", "histogram_mode"]
