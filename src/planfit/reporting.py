from __future__ import annotations

from collections import Counter
from typing import Iterable, Sequence

import pandas as pd

from .analysis import active_family
from .catalog import asset_name, metric_name
from .models import AnalysisStatus, AnalysisUnit

EXPORT_COLUMNS = [
    "Asset",
    "Metric",
    "Period",
    "A (Min)",
    "B (Mode)",
    "C (Max)",
    "Mean",
    "StdDev",
    "P10",
    "P50",
    "P90",
]


def export_frame(units: Iterable[AnalysisUnit], decimals: int = 4) -> pd.DataFrame:
    """Distribution parameters and planning values of every non-ignored unit."""

    rows = []
    for unit in units:
        if unit.ignored:
            continue
        dist = unit.distribution
        rows.append(
            [
                asset_name(unit.asset_id) if unit.asset_id else unit.unit_id,
                metric_name(unit.metric_id) if unit.metric_id else "",
                unit.label,
                dist.min,
                dist.mode,
                dist.max,
                dist.mean,
                dist.std_dev,
                unit.planned_p10,
                unit.planned_p50,
                unit.planned_p90,
            ]
        )
    frame = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    numeric = EXPORT_COLUMNS[3:]
    frame[numeric] = frame[numeric].astype(float).round(decimals)
    return frame


def make_summary_text(units: Sequence[AnalysisUnit]) -> str:
    statuses = Counter(unit.status for unit in units)
    fits = Counter(active_family(unit).value for unit in units if not unit.ignored)
    ignored = sum(1 for unit in units if unit.ignored)
    fit_text = ", ".join(f"{name}={count}" for name, count in fits.most_common()) or "(none)"
    return (
        f"Analysed {len(units)} units ({ignored} ignored).\n"
        f"Status: OK={statuses[AnalysisStatus.OK]}, "
        f"Warning={statuses[AnalysisStatus.WARNING]}, "
        f"Error={statuses[AnalysisStatus.ERROR]}.\n"
        f"Active distributions: {fit_text}.\n"
    )


__all__ = ["EXPORT_COLUMNS", "export_frame", "make_summary_text"]
