from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Mapping, Optional, Tuple


class DistributionFamily(str, Enum):
    """Concrete probability distribution families, in evaluation order."""

    NORMAL = "Normal"
    LOGNORMAL = "LogNormal"
    TRIANGULAR = "Triangular"
    PERT = "PERT"
    WEIBULL = "Weibull"


class DistributionChoice(str, Enum):
    """Caller-facing selection; ``Auto`` defers to the best-fit family."""

    AUTO = "Auto"
    NORMAL = "Normal"
    LOGNORMAL = "LogNormal"
    TRIANGULAR = "Triangular"
    PERT = "PERT"
    WEIBULL = "Weibull"

    def resolve(self, best_fit: DistributionFamily) -> DistributionFamily:
        if self is DistributionChoice.AUTO:
            return best_fit
        return DistributionFamily(self.value)


class AnalysisStatus(str, Enum):
    OK = "OK"
    WARNING = "Warning"
    ERROR = "Error"


def _lookup_enum(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    text = str(getattr(value, "value", value)).strip().lower()
    for member in enum_cls:
        if member.value.lower() == text or member.name.lower() == text:
            return member
    raise ValueError(f"{value!r} is not a valid {enum_cls.__name__}")


def as_family(value: object) -> DistributionFamily:
    """Coerce ``value`` to a concrete family; ``Auto`` is rejected."""

    return _lookup_enum(DistributionFamily, value)


def as_choice(value: object) -> DistributionChoice:
    return _lookup_enum(DistributionChoice, value)


@dataclass(frozen=True)
class DistributionParams:
    """Summary statistics used to parameterise every family."""

    min: float = 0.0
    mode: float = 0.0
    max: float = 0.0
    mean: float = 0.0
    std_dev: float = 0.0

    @property
    def range(self) -> float:
        return self.max - self.min


# Partial filter updates may arrive with the UI's camelCase keys.
_FILTER_KEY_ALIASES = {
    "trimBottomPct": "trim_bottom_pct",
    "trimTopPct": "trim_top_pct",
    "sigmaFilter": "sigma_filter",
    "absoluteMin": "absolute_min",
    "absoluteMax": "absolute_max",
}


def _bound_is_set(value: Optional[float]) -> bool:
    return value is not None and not math.isnan(value)


def setting_or_zero(value: object) -> float:
    """Trim and sigma settings that are missing, non-numeric or non-finite count as off."""

    if value is None:
        return 0.0
    try:
        numeric = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(numeric):
        return 0.0
    return numeric


def _bound_value(value: object) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class FilterConfig:
    """Outlier filter settings for one analysis unit."""

    trim_bottom_pct: float = 0.0
    trim_top_pct: float = 0.0
    sigma_filter: float = 0.0
    absolute_min: Optional[float] = None
    absolute_max: Optional[float] = None

    @property
    def has_absolute_min(self) -> bool:
        return _bound_is_set(self.absolute_min)

    @property
    def has_absolute_max(self) -> bool:
        return _bound_is_set(self.absolute_max)

    @property
    def is_noop(self) -> bool:
        return (
            not self.has_absolute_min
            and not self.has_absolute_max
            and setting_or_zero(self.sigma_filter) <= 0
            and setting_or_zero(self.trim_bottom_pct) <= 0
            and setting_or_zero(self.trim_top_pct) <= 0
        )

    def merged(self, partial: Optional[Mapping[str, object]] = None, **overrides: object) -> "FilterConfig":
        """Return a copy with ``partial``/``overrides`` applied on top.

        Keys that are present override the current value, including an
        explicit ``None`` which clears an absolute bound. Unusable trim or
        sigma values switch that stage off.
        """

        updates = dict(partial or {})
        updates.update(overrides)
        known = {f.name for f in fields(self)}
        changes = {}
        for key, value in updates.items():
            name = _FILTER_KEY_ALIASES.get(key, key)
            if name not in known:
                raise TypeError(f"Unknown filter setting: {key}")
            if name in ("absolute_min", "absolute_max"):
                changes[name] = _bound_value(value)
            else:
                changes[name] = setting_or_zero(value)
        return replace(self, **changes)


@dataclass(frozen=True)
class StatusResult:
    status: AnalysisStatus
    message: Optional[str] = None


@dataclass(frozen=True)
class AnalysisUnit:
    """One analysed series: samples, filter state, fit and planning values.

    Instances are immutable; the functions in :mod:`planfit.analysis` return
    updated copies.
    """

    unit_id: str
    raw_samples: Tuple[float, ...]
    filtered_samples: Tuple[float, ...]
    distribution: DistributionParams
    best_fit: DistributionFamily
    planned_p10: float
    planned_p50: float
    planned_p90: float
    status: AnalysisStatus
    status_message: Optional[str] = None
    filter_config: FilterConfig = field(default_factory=FilterConfig)
    selected_distribution: DistributionChoice = DistributionChoice.AUTO
    ignored: bool = False
    asset_id: str = ""
    metric_id: str = ""
    period_index: int = 0
    label: str = ""


__all__ = [
    "AnalysisStatus",
    "AnalysisUnit",
    "DistributionChoice",
    "DistributionFamily",
    "DistributionParams",
    "FilterConfig",
    "StatusResult",
    "as_choice",
    "as_family",
    "setting_or_zero",
]
