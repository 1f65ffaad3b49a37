from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import SimpleNamespace
from typing import Mapping, Optional

from .models import DistributionChoice, FilterConfig, as_choice

_BOOLEAN_TRUE = {"1", "true", "yes", "on"}

MAX_TRIM_PCT = 25.0
DEFAULT_MONTHS = 12
DEFAULT_START_DATE = "2024-01-01"


@dataclass(frozen=True)
class Config:
    """Runtime configuration assembled from environment variables and CLI options."""

    samples_path: Optional[Path]
    output_path: Optional[Path]
    audit_output_path: Optional[Path]
    filter_config: FilterConfig = field(default_factory=FilterConfig)
    distribution: DistributionChoice = DistributionChoice.AUTO
    planned_p50: Optional[float] = None
    synthetic: bool = False
    seed: Optional[int] = None
    months: int = DEFAULT_MONTHS
    start_date: str = DEFAULT_START_DATE
    max_workers: Optional[int] = None
    verbose: bool = False


def _to_path(value: object | None) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, Path):
        return value.expanduser().resolve()
    text = str(value).strip()
    if not text:
        return None
    return Path(text).expanduser().resolve()


def _to_int(value: object | None) -> Optional[int]:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(float(text))
    except ValueError:
        return None


def _to_float(value: object | None) -> Optional[float]:
    if value is None:
        return None
    text = str(value).replace(",", "").strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _flag(value: object | None) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _BOOLEAN_TRUE


def _namespace(cli_args: object | None) -> SimpleNamespace:
    if cli_args is None:
        return SimpleNamespace()
    if isinstance(cli_args, SimpleNamespace):
        return cli_args
    if hasattr(cli_args, "__dict__"):
        return SimpleNamespace(**{k: v for k, v in vars(cli_args).items()})
    return SimpleNamespace()


def _clamp_pct(value: Optional[float]) -> float:
    if value is None:
        return 0.0
    return min(max(float(value), 0.0), MAX_TRIM_PCT)


def _to_choice(value: object | None) -> Optional[DistributionChoice]:
    if value is None or not str(value).strip():
        return None
    try:
        return as_choice(value)
    except ValueError:
        return None


def load_config(env: Mapping[str, str], cli_args: object | None = None) -> Config:
    """Build a runtime :class:`Config` from environment variables and CLI options."""

    samples_path = _to_path(env.get("PLANFIT_SAMPLES"))
    output_path = _to_path(env.get("PLANFIT_OUTPUT"))
    audit_output_path = _to_path(env.get("PLANFIT_AUDIT_OUTPUT"))
    trim_bottom = _to_float(env.get("PLANFIT_TRIM_BOTTOM_PCT"))
    trim_top = _to_float(env.get("PLANFIT_TRIM_TOP_PCT"))
    sigma = _to_float(env.get("PLANFIT_SIGMA_FILTER"))
    absolute_min = _to_float(env.get("PLANFIT_ABSOLUTE_MIN"))
    absolute_max = _to_float(env.get("PLANFIT_ABSOLUTE_MAX"))
    distribution = _to_choice(env.get("PLANFIT_DISTRIBUTION")) or DistributionChoice.AUTO
    planned_p50 = _to_float(env.get("PLANFIT_PLANNED_P50"))
    seed = _to_int(env.get("PLANFIT_SEED"))
    months = _to_int(env.get("PLANFIT_MONTHS")) or DEFAULT_MONTHS
    start_date = (env.get("PLANFIT_START_DATE") or "").strip() or DEFAULT_START_DATE
    max_workers = _to_int(env.get("PLANFIT_MAX_WORKERS"))
    synthetic = False
    verbose = _flag(env.get("PLANFIT_VERBOSE"))

    cli_ns = _namespace(cli_args)
    if getattr(cli_ns, "samples", None):
        samples_path = _to_path(cli_ns.samples) or samples_path
    if getattr(cli_ns, "output", None):
        output_path = _to_path(cli_ns.output) or output_path
    if getattr(cli_ns, "audit_output", None):
        audit_output_path = _to_path(cli_ns.audit_output) or audit_output_path
    if getattr(cli_ns, "trim_bottom", None) is not None:
        trim_bottom = _to_float(cli_ns.trim_bottom)
    if getattr(cli_ns, "trim_top", None) is not None:
        trim_top = _to_float(cli_ns.trim_top)
    if getattr(cli_ns, "sigma", None) is not None:
        sigma = _to_float(cli_ns.sigma)
    if getattr(cli_ns, "absolute_min", None) is not None:
        absolute_min = _to_float(cli_ns.absolute_min)
    if getattr(cli_ns, "absolute_max", None) is not None:
        absolute_max = _to_float(cli_ns.absolute_max)
    if getattr(cli_ns, "distribution", None):
        distribution = _to_choice(cli_ns.distribution) or distribution
    if getattr(cli_ns, "planned_p50", None) is not None:
        planned_p50 = _to_float(cli_ns.planned_p50)
    if getattr(cli_ns, "seed", None) is not None:
        seed = _to_int(cli_ns.seed)
    if getattr(cli_ns, "months", None) is not None:
        months = max(1, int(cli_ns.months))
    if getattr(cli_ns, "start_date", None):
        start_date = str(cli_ns.start_date).strip()
    if getattr(cli_ns, "max_workers", None) is not None:
        max_workers = _to_int(cli_ns.max_workers)
    if getattr(cli_ns, "synthetic", False):
        synthetic = True
    if getattr(cli_ns, "verbose", False):
        verbose = bool(cli_ns.verbose)

    filter_config = FilterConfig(
        trim_bottom_pct=_clamp_pct(trim_bottom),
        trim_top_pct=_clamp_pct(trim_top),
        sigma_filter=max(0.0, sigma or 0.0),
        absolute_min=absolute_min,
        absolute_max=absolute_max,
    )

    return Config(
        samples_path=samples_path,
        output_path=output_path,
        audit_output_path=audit_output_path,
        filter_config=filter_config,
        distribution=distribution,
        planned_p50=planned_p50,
        synthetic=synthetic or samples_path is None,
        seed=seed,
        months=months,
        start_date=start_date,
        max_workers=max_workers,
        verbose=verbose,
    )


__all__ = ["Config", "load_config"]
