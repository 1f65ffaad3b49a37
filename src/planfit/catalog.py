"""
Equipment and metric catalogue used to label analysis units.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Asset:
    asset_id: str
    name: str
    asset_type: str


@dataclass(frozen=True)
class Metric:
    metric_id: str
    name: str
    metric_type: str
    volume_type: Optional[str] = None


# Keep tuple structure to preserve order for display
ASSETS: Tuple[Asset, ...] = (
    Asset("t1", "Truck 001", "Truck"),
    Asset("t2", "Truck 002", "Truck"),
    Asset("t3", "Truck 003", "Truck"),
    Asset("d1", "Drill 101", "Drill"),
    Asset("d2", "Drill 102", "Drill"),
    Asset("dl1", "Dragline Alpha", "Dragline"),
)

METRICS: Tuple[Metric, ...] = (
    Metric("m1", "Meal Break", "Individual"),
    Metric("m2", "Shift Change", "Individual"),
    Metric("m3", "Refuel", "Individual"),
    Metric("m4", "Weather Delay", "Individual"),
    Metric("c1", "Availability", "Calculated", "Availability"),
    Metric("c2", "Utilisation", "Calculated", "Utilisation"),
    Metric("c3", "Production Rate", "Calculated", "Rate"),
)

ASSET_NAMES: Dict[str, str] = {asset.asset_id: asset.name for asset in ASSETS}
METRIC_NAMES: Dict[str, str] = {metric.metric_id: metric.name for metric in METRICS}


def asset_ids() -> List[str]:
    return [asset.asset_id for asset in ASSETS]


def metric_ids() -> List[str]:
    return [metric.metric_id for metric in METRICS]


def asset_name(asset_id: str) -> str:
    """Display name for ``asset_id``; unknown ids are returned unchanged."""

    return ASSET_NAMES.get(asset_id, asset_id)


def metric_name(metric_id: str) -> str:
    return METRIC_NAMES.get(metric_id, metric_id)


def baseline_for_metric(name: str) -> Tuple[float, float]:
    """
    Typical ``(mean, std_dev)`` of a metric, keyed off its display name.

    Delay and break durations sit around 30 +/- 10, availability around
    85 +/- 5, everything else around 100 +/- 15.
    """

    if "Delay" in name or "Break" in name:
        return 30.0, 10.0
    if "Availability" in name:
        return 85.0, 5.0
    return 100.0, 15.0


__all__ = [
    "ASSETS",
    "ASSET_NAMES",
    "Asset",
    "METRICS",
    "METRIC_NAMES",
    "Metric",
    "asset_ids",
    "asset_name",
    "baseline_for_metric",
    "metric_ids",
    "metric_name",
]
