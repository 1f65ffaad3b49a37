from __future__ import annotations

import math

import numpy as np
import pytest

from planfit.filters import (
    FILTER_STAGES,
    ExclusionReason,
    apply_absolute_bounds,
    apply_filters,
    apply_sigma_clip,
    apply_tail_trim,
    audit_exclusions,
    audit_frame,
)
from planfit.models import FilterConfig


def test_stage_order_is_fixed():
    assert list(FILTER_STAGES) == [apply_absolute_bounds, apply_sigma_clip, apply_tail_trim]


def test_tail_trim_keeps_middle_slice():
    samples = list(range(100, 0, -1))
    kept = apply_filters(samples, FilterConfig(trim_bottom_pct=10, trim_top_pct=10))
    assert kept == [float(v) for v in range(11, 91)]


def test_tail_trim_skipped_when_it_would_remove_everything():
    samples = [5.0, 1.0, 4.0, 2.0, 3.0]
    kept = apply_filters(samples, FilterConfig(trim_bottom_pct=60, trim_top_pct=60))
    assert kept == [1.0, 2.0, 3.0, 4.0, 5.0]


def test_empty_samples_stay_empty():
    assert apply_filters([], FilterConfig(trim_bottom_pct=10, sigma_filter=2)) == []


def test_sigma_clip_removes_injected_outliers():
    rng = np.random.default_rng(42)
    core = rng.normal(100, 10, 1000)
    samples = np.concatenate([core, np.full(5, 1000.0)])
    kept = apply_filters(samples, FilterConfig(sigma_filter=3))
    assert max(kept) < 1000
    assert 990 <= len(kept) <= 1000


def test_sigma_clip_needs_more_than_two_samples():
    assert apply_filters([1.0, 100.0], FilterConfig(sigma_filter=2)) == [1.0, 100.0]


def test_small_series_outlier_excluded():
    samples = [10, 12, 11, 13, 9, 10, 11, 12, 10, 50]
    kept = apply_filters(samples, FilterConfig(sigma_filter=2))
    assert 50 not in kept
    assert len(kept) == 9


def test_absolute_bounds_applied_before_other_stages():
    samples = [-40.0, -1.0, 5.0, 20.0, 35.0, 50.0, 65.0, 80.0, 99.0, 101.0, 500.0]
    config = FilterConfig(absolute_min=0, absolute_max=100, sigma_filter=2, trim_bottom_pct=0)
    kept = apply_filters(samples, config)
    assert kept == [5.0, 20.0, 35.0, 50.0, 65.0, 80.0, 99.0]

    audit = audit_exclusions(samples, config)
    limited = [entry.value for entry in audit if entry.reason is ExclusionReason.LIMIT]
    assert limited == [-40.0, -1.0, 101.0, 500.0]


def test_nan_bounds_are_ignored():
    config = FilterConfig(absolute_min=math.nan, absolute_max=math.nan)
    assert apply_filters([3.0, 1.0, 2.0], config) == [1.0, 2.0, 3.0]


def test_raw_samples_not_mutated():
    raw = np.array([3.0, 1.0, 2.0, 100.0, 4.0])
    apply_filters(raw, FilterConfig(sigma_filter=1, trim_top_pct=20))
    assert raw.tolist() == [3.0, 1.0, 2.0, 100.0, 4.0]


def test_audit_tags_each_stage():
    samples = [-5.0] + [float(v) for v in range(1, 21)] + [1000.0]
    config = FilterConfig(absolute_min=0, sigma_filter=2, trim_bottom_pct=10, trim_top_pct=10)
    audit = audit_exclusions(samples, config)
    reasons = {entry.value: entry.reason for entry in audit}
    assert reasons[-5.0] is ExclusionReason.LIMIT
    assert reasons[1000.0] is ExclusionReason.SIGMA
    assert reasons[1.0] is ExclusionReason.TAIL
    assert reasons[2.0] is ExclusionReason.TAIL
    assert reasons[19.0] is ExclusionReason.TAIL
    assert reasons[20.0] is ExclusionReason.TAIL
    assert reasons[10.0] is None
    assert [entry.index for entry in audit] == list(range(len(samples)))


@pytest.mark.parametrize(
    "config",
    [
        FilterConfig(),
        FilterConfig(sigma_filter=2),
        FilterConfig(sigma_filter=3, trim_bottom_pct=5, trim_top_pct=15),
        FilterConfig(absolute_min=20, absolute_max=60, sigma_filter=2, trim_top_pct=25),
        FilterConfig(trim_bottom_pct=25, trim_top_pct=25),
    ],
)
def test_audit_matches_pipeline(config):
    rng = np.random.default_rng(7)
    samples = np.round(np.concatenate([rng.normal(40, 8, 200), [150.0, -30.0, 400.0]]), 1)
    kept = apply_filters(samples, config)
    audited = sorted(entry.value for entry in audit_exclusions(samples, config) if not entry.excluded)
    assert audited == kept


def test_audit_frame_columns():
    frame = audit_frame([1.0, 2.0, 300.0], FilterConfig(absolute_max=100))
    assert list(frame.columns) == ["index", "value", "excluded", "reason"]
    assert frame["excluded"].tolist() == [False, False, True]
    assert frame["reason"].tolist() == ["", "", "Limit"]


@pytest.mark.parametrize(
    "config",
    [
        FilterConfig(sigma_filter=math.nan),
        FilterConfig(sigma_filter=math.inf),
        FilterConfig(sigma_filter=None),
        FilterConfig(trim_bottom_pct=math.nan, trim_top_pct=math.nan),
        FilterConfig(trim_bottom_pct=None, trim_top_pct=math.inf),
        FilterConfig(trim_bottom_pct=-10),
    ],
)
def test_unusable_trim_and_sigma_settings_are_ignored(config):
    samples = [10.0, 12.0, 11.0, 13.0, 9.0, 10.0, 11.0, 12.0, 10.0, 50.0]
    assert apply_filters(samples, config) == sorted(samples)
    assert not any(entry.excluded for entry in audit_exclusions(samples, config))


def test_merged_normalises_unusable_settings():
    config = FilterConfig(sigma_filter=2, trim_top_pct=10).merged(
        {"trimBottomPct": None, "sigmaFilter": math.nan, "trimTopPct": "lots", "absoluteMax": "n/a"}
    )
    assert config == FilterConfig()
    assert config.is_noop
