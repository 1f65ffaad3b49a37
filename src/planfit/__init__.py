"""Distribution fitting and outlier filtering for planning inputs."""

from .analysis import create_unit, recompute_with_filter
from .fit import score_fit, select_best_fit
from .models import (
    AnalysisStatus,
    AnalysisUnit,
    DistributionChoice,
    DistributionFamily,
    DistributionParams,
    FilterConfig,
)
from .stats import compute_distribution

__all__ = [
    "AnalysisStatus",
    "AnalysisUnit",
    "DistributionChoice",
    "DistributionFamily",
    "DistributionParams",
    "FilterConfig",
    "compute_distribution",
    "create_unit",
    "recompute_with_filter",
    "score_fit",
    "select_best_fit",
]
