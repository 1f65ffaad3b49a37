from __future__ import annotations

import math

import numpy as np
import pytest

from planfit.distributions import (
    evaluate_pdf,
    lognormal_pdf,
    normal_pdf,
    pert_pdf,
    stirling_gamma,
    triangular_pdf,
    weibull_pdf,
)
from planfit.models import DistributionChoice, DistributionFamily, DistributionParams


def _integral(pdf, lower, upper, points=20001):
    xs = np.linspace(lower, upper, points)
    return float(np.sum(pdf(xs)) * (xs[1] - xs[0]))


def test_stirling_gamma_is_close_but_approximate():
    assert stirling_gamma(5.0) == pytest.approx(24.0, rel=0.03)
    assert stirling_gamma(1.0) == pytest.approx(0.922, abs=0.001)
    assert stirling_gamma(1.0) != 1.0


def test_stirling_gamma_overflow_is_infinite():
    assert math.isinf(stirling_gamma(500.0))


def test_normal_peak_and_degenerate_spread():
    assert normal_pdf(10.0, 10.0, 2.0) == pytest.approx(1 / (2.0 * math.sqrt(2 * math.pi)))
    assert normal_pdf(10.0, 10.0, 0.0) == 0.0
    assert _integral(lambda x: normal_pdf(x, 0.0, 1.0), -8, 8) == pytest.approx(1.0, abs=1e-3)


def test_lognormal_support_and_moments():
    assert lognormal_pdf(0.0, 30.0, 10.0) == 0.0
    assert lognormal_pdf(-1.0, 30.0, 10.0) == 0.0
    assert lognormal_pdf(30.0, -5.0, 10.0) == 0.0
    assert lognormal_pdf(30.0, 30.0, 0.0) == 0.0
    xs = np.linspace(1e-6, 300, 200001)
    dx = xs[1] - xs[0]
    density = lognormal_pdf(xs, 30.0, 10.0)
    assert float(np.sum(density) * dx) == pytest.approx(1.0, abs=1e-3)
    assert float(np.sum(xs * density) * dx) == pytest.approx(30.0, rel=1e-3)


def test_triangular_shape():
    assert triangular_pdf(5.0, 0.0, 5.0, 10.0) == pytest.approx(0.2)
    assert triangular_pdf(2.5, 0.0, 5.0, 10.0) == pytest.approx(0.1)
    assert triangular_pdf(-0.1, 0.0, 5.0, 10.0) == 0.0
    assert triangular_pdf(10.1, 0.0, 5.0, 10.0) == 0.0
    assert triangular_pdf(1.0, 3.0, 3.0, 3.0) == 0.0
    assert _integral(lambda x: triangular_pdf(x, 0.0, 2.0, 10.0), 0, 10) == pytest.approx(1.0, abs=1e-3)


def test_pert_is_zero_at_endpoints():
    assert pert_pdf(0.0, 0.0, 4.0, 10.0) == 0.0
    assert pert_pdf(10.0, 0.0, 4.0, 10.0) == 0.0
    assert pert_pdf(4.0, 0.0, 4.0, 10.0) > 0


def test_pert_symmetric_and_roughly_normalised():
    assert pert_pdf(3.0, 0.0, 5.0, 10.0) == pytest.approx(pert_pdf(7.0, 0.0, 5.0, 10.0))
    # Stirling's gamma keeps the normaliser within a few percent
    total = _integral(lambda x: pert_pdf(x, 0.0, 5.0, 10.0), 0, 10)
    assert 0.9 < total < 1.2


def test_weibull_support():
    assert weibull_pdf(0.0, 30.0, 10.0) == 0.0
    assert weibull_pdf(-3.0, 30.0, 10.0) == 0.0
    assert weibull_pdf(30.0, 0.0, 10.0) == 0.0
    assert weibull_pdf(30.0, 30.0, 10.0) > 0


def test_weibull_extreme_spread_stays_finite():
    xs = np.linspace(0.01, 5000, 50)
    for std_dev in (1e-9, 1000.0):
        density = weibull_pdf(xs, 1.0, std_dev)
        assert np.all(np.isfinite(density))
        assert np.all(density >= 0)


def test_array_input_returns_array():
    xs = np.array([1.0, 2.0, 3.0])
    result = normal_pdf(xs, 2.0, 1.0)
    assert isinstance(result, np.ndarray)
    assert result.shape == (3,)


def test_evaluate_pdf_dispatch():
    params = DistributionParams(min=0.0, mode=5.0, max=10.0, mean=5.0, std_dev=2.0)
    assert evaluate_pdf(DistributionFamily.TRIANGULAR, 5.0, params) == pytest.approx(0.2)
    assert evaluate_pdf("Normal", 5.0, params) == pytest.approx(normal_pdf(5.0, 5.0, 2.0))
    assert evaluate_pdf(DistributionChoice.PERT, 5.0, params) == pytest.approx(pert_pdf(5.0, 0.0, 5.0, 10.0))


def test_evaluate_pdf_rejects_auto():
    params = DistributionParams(min=0.0, mode=5.0, max=10.0, mean=5.0, std_dev=2.0)
    with pytest.raises(ValueError):
        evaluate_pdf(DistributionChoice.AUTO, 5.0, params)
    with pytest.raises(ValueError):
        evaluate_pdf("Auto", 5.0, params)
