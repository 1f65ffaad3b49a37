from __future__ import annotations

from .models import AnalysisStatus, DistributionParams, StatusResult

MIN_STATUS_SAMPLES = 5
DEVIATION_SIGMA_LIMIT = 1.5
VARIANCE_RATIO_LIMIT = 0.4

INSUFFICIENT_DATA = "insufficient data"
PLAN_DEVIATION = "plan deviation exceeds 1.5 standard deviations"
HIGH_VARIANCE = "variance exceeds 40% of mean"


def evaluate_status(params: DistributionParams, planned_p50: float, sample_count: int) -> StatusResult:
    """Advisory health check of a fitted unit against its planned P50."""

    if sample_count < MIN_STATUS_SAMPLES:
        return StatusResult(AnalysisStatus.ERROR, INSUFFICIENT_DATA)
    if abs(params.mean - planned_p50) > DEVIATION_SIGMA_LIMIT * params.std_dev:
        return StatusResult(AnalysisStatus.WARNING, PLAN_DEVIATION)
    if params.mean != 0 and params.std_dev > VARIANCE_RATIO_LIMIT * abs(params.mean):
        return StatusResult(AnalysisStatus.WARNING, HIGH_VARIANCE)
    return StatusResult(AnalysisStatus.OK)


__all__ = ["evaluate_status"]
