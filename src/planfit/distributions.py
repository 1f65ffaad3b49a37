"""
Closed-form probability density functions for the five fitted families.

All functions accept a scalar or an array of evaluation points and return a
density of the same shape (a ``float`` for scalar input). Points where a
density is undefined, or where the arithmetic overflows, evaluate to ``0``.

The gamma function used by the PERT normaliser and the Weibull scale is the
plain Stirling approximation ``sqrt(2*pi/n) * (n/e)**n``. It is a known
low-precision shortcut (a few percent low for small ``n``) that is adequate
for ranking fits; it is not an exact gamma.
"""

from __future__ import annotations

from typing import Callable, Dict, Union

import numpy as np

from .models import DistributionFamily, DistributionParams, as_family

ArrayLike = Union[float, np.ndarray]

SQRT_2PI = float(np.sqrt(2 * np.pi))
# Empirical exponent of the coefficient-of-variation shape estimate.
WEIBULL_SHAPE_EXPONENT = -1.086


def _points(x: ArrayLike) -> np.ndarray:
    return np.asarray(x, dtype=float)


def _finish(x: ArrayLike, density: np.ndarray) -> ArrayLike:
    density = np.where(np.isfinite(density) & (density > 0), density, 0.0)
    if np.ndim(x) == 0:
        return float(density)
    return density


def stirling_gamma(n: ArrayLike) -> ArrayLike:
    """Stirling's approximation of ``Gamma(n)``; ``inf`` once it overflows."""

    values = _points(n)
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        result = np.sqrt(2 * np.pi / values) * np.power(values / np.e, values)
    if np.ndim(n) == 0:
        return float(result)
    return result


def normal_pdf(x: ArrayLike, mean: float, std_dev: float) -> ArrayLike:
    pts = _points(x)
    if std_dev <= 0:
        return _finish(x, np.zeros_like(pts))
    with np.errstate(all="ignore"):
        density = np.exp(-0.5 * ((pts - mean) / std_dev) ** 2) / (std_dev * SQRT_2PI)
    return _finish(x, density)


def lognormal_pdf(x: ArrayLike, mean: float, std_dev: float) -> ArrayLike:
    """Log-normal density matched to the arithmetic ``mean`` and ``std_dev``."""

    pts = _points(x)
    if std_dev <= 0 or mean <= 0:
        return _finish(x, np.zeros_like(pts))
    sigma2 = float(np.log(1 + (std_dev * std_dev) / (mean * mean)))
    mu = float(np.log(mean)) - 0.5 * sigma2
    sigma = float(np.sqrt(sigma2))
    positive = pts > 0
    safe = np.where(positive, pts, 1.0)
    with np.errstate(all="ignore"):
        density = np.exp(-((np.log(safe) - mu) ** 2) / (2 * sigma2)) / (safe * sigma * SQRT_2PI)
    return _finish(x, np.where(positive, density, 0.0))


def triangular_pdf(x: ArrayLike, minimum: float, mode: float, maximum: float) -> ArrayLike:
    pts = _points(x)
    span = maximum - minimum
    if span <= 0:
        return _finish(x, np.zeros_like(pts))
    with np.errstate(all="ignore"):
        rising = (2 * (pts - minimum)) / (span * (mode - minimum))
        falling = (2 * (maximum - pts)) / (span * (maximum - mode))
    density = np.where(pts < mode, rising, falling)
    density = np.where(pts == mode, 2 / span, density)
    density = np.where((pts < minimum) | (pts > maximum), 0.0, density)
    return _finish(x, density)


def pert_pdf(x: ArrayLike, minimum: float, mode: float, maximum: float) -> ArrayLike:
    """Beta-PERT density on the open interval ``(minimum, maximum)``."""

    pts = _points(x)
    span = maximum - minimum
    if span <= 0:
        return _finish(x, np.zeros_like(pts))
    alpha = 1 + 4 * (mode - minimum) / span
    beta = 1 + 4 * (maximum - mode) / span
    beta_fn = stirling_gamma(alpha) * stirling_gamma(beta) / stirling_gamma(alpha + beta)
    inside = (pts > minimum) & (pts < maximum)
    z = np.where(inside, (pts - minimum) / span, 0.5)
    with np.errstate(all="ignore"):
        density = np.power(z, alpha - 1) * np.power(1 - z, beta - 1) / (beta_fn * span)
    return _finish(x, np.where(inside, density, 0.0))


def weibull_pdf(x: ArrayLike, mean: float, std_dev: float) -> ArrayLike:
    """Weibull density with shape/scale estimated from ``mean`` and ``std_dev``.

    Shape ``k = (std_dev/mean) ** -1.086`` and scale
    ``lambda = mean / Gamma(1 + 1/k)``.
    """

    pts = _points(x)
    if mean <= 0 or std_dev <= 0:
        return _finish(x, np.zeros_like(pts))
    with np.errstate(all="ignore"):
        k = float(np.power(std_dev / mean, WEIBULL_SHAPE_EXPONENT))
        scale = mean / stirling_gamma(1 + 1 / k)
    if not np.isfinite(scale) or scale <= 0:
        return _finish(x, np.zeros_like(pts))
    positive = pts > 0
    ratio = np.where(positive, pts / scale, 1.0)
    with np.errstate(all="ignore"):
        density = (k / scale) * np.power(ratio, k - 1) * np.exp(-np.power(ratio, k))
    return _finish(x, np.where(positive, density, 0.0))


PDF_FUNCTIONS: Dict[DistributionFamily, Callable[[ArrayLike, DistributionParams], ArrayLike]] = {
    DistributionFamily.NORMAL: lambda x, p: normal_pdf(x, p.mean, p.std_dev),
    DistributionFamily.LOGNORMAL: lambda x, p: lognormal_pdf(x, p.mean, p.std_dev),
    DistributionFamily.TRIANGULAR: lambda x, p: triangular_pdf(x, p.min, p.mode, p.max),
    DistributionFamily.PERT: lambda x, p: pert_pdf(x, p.min, p.mode, p.max),
    DistributionFamily.WEIBULL: lambda x, p: weibull_pdf(x, p.mean, p.std_dev),
}


def evaluate_pdf(family: object, x: ArrayLike, params: DistributionParams) -> ArrayLike:
    """Evaluate the density of ``family`` parameterised from ``params``."""

    return PDF_FUNCTIONS[as_family(family)](x, params)


__all__ = [
    "PDF_FUNCTIONS",
    "evaluate_pdf",
    "lognormal_pdf",
    "normal_pdf",
    "pert_pdf",
    "stirling_gamma",
    "triangular_pdf",
    "weibull_pdf",
]
