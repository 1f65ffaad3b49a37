from __future__ import annotations

from planfit.models import AnalysisStatus, DistributionParams
from planfit.status import HIGH_VARIANCE, INSUFFICIENT_DATA, PLAN_DEVIATION, evaluate_status


def _params(mean: float, std_dev: float) -> DistributionParams:
    return DistributionParams(min=mean - 2 * std_dev, mode=mean, max=mean + 2 * std_dev, mean=mean, std_dev=std_dev)


def test_insufficient_data_is_error():
    result = evaluate_status(_params(10, 1), 10, 4)
    assert result.status is AnalysisStatus.ERROR
    assert result.message == INSUFFICIENT_DATA


def test_plan_deviation_warning():
    result = evaluate_status(_params(100, 10), 116, 50)
    assert result.status is AnalysisStatus.WARNING
    assert result.message == PLAN_DEVIATION


def test_deviation_exactly_at_limit_is_not_flagged():
    assert evaluate_status(_params(100, 10), 115, 50).status is AnalysisStatus.OK


def test_high_variance_warning():
    result = evaluate_status(_params(20, 10), 20, 50)
    assert result.status is AnalysisStatus.WARNING
    assert result.message == HIGH_VARIANCE


def test_deviation_checked_before_variance():
    assert evaluate_status(_params(20, 10), 40, 50).message == PLAN_DEVIATION


def test_zero_mean_skips_variance_check():
    assert evaluate_status(_params(0, 5), 0, 50).status is AnalysisStatus.OK


def test_ok_has_no_message():
    result = evaluate_status(_params(100, 10), 100, 50)
    assert result.status is AnalysisStatus.OK
    assert result.message is None
