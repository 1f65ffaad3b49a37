from __future__ import annotations

import numpy as np

from planfit import catalog
from planfit.sample_data import SAMPLES_PER_UNIT, generate_analysis_units, generate_samples, period_labels


def test_period_labels_start_at_month():
    assert period_labels("2024-03-15", 3) == ["Mar 2024", "Apr 2024", "May 2024"]
    assert period_labels("2024-11-01", 3) == ["Nov 2024", "Dec 2024", "Jan 2025"]
    assert period_labels("2024-01-01", 0) == []


def test_one_unit_per_asset_metric_month():
    units = generate_analysis_units(["t1", "d1"], ["m1", "c1", "c3"], "2024-01-01", months=4, seed=3)
    assert len(units) == 2 * 3 * 4
    assert units[0].unit_id == "t1-m1-0"
    assert units[0].label == "Jan 2024"
    assert units[-1].unit_id == "d1-c3-3"
    assert {unit.period_index for unit in units} == {0, 1, 2, 3}


def test_generation_is_reproducible_with_seed():
    first = generate_analysis_units(["t1"], ["m4"], months=6, seed=99)
    second = generate_analysis_units(["t1"], ["m4"], months=6, seed=99)
    assert first == second


def test_samples_are_non_negative_and_rounded():
    units = generate_analysis_units(months=2, seed=1)
    assert len(units) == len(catalog.ASSETS) * len(catalog.METRICS) * 2
    for unit in units:
        assert len(unit.raw_samples) in (0, SAMPLES_PER_UNIT)
        assert all(value >= 0 for value in unit.raw_samples)
        assert all(round(value, 2) == value for value in unit.raw_samples)


def test_planned_p50_stays_near_sample_mean():
    for unit in generate_analysis_units(["t2"], ["m3"], months=12, seed=4):
        if unit.raw_samples:
            assert abs(unit.planned_p50 - unit.distribution.mean) <= 0.2 * unit.distribution.mean + 0.01


def test_generate_samples_lognormal_shape():
    rng = np.random.default_rng(0)
    values = generate_samples(rng, 30.0, 10.0, count=500, lognormal=True)
    assert len(values) == 500
    assert np.all(np.isfinite(values))
    assert 20 < float(np.median(values)) < 40


def test_generate_samples_empty():
    assert generate_samples(np.random.default_rng(0), 30.0, 10.0, count=0) == []
