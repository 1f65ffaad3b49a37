"""Read long-format sample tables (one observation per row)."""

from __future__ import annotations

from collections import OrderedDict
from pathlib import Path
from typing import Dict, List

import pandas as pd

UNIT_COLUMN = "unit_id"
VALUE_COLUMN = "value"
_COMPOSITE_COLUMNS = ("asset_id", "metric_id", "period")


class SampleTableError(ValueError):
    """Raised when a sample table cannot be read or lacks required columns."""


# Legacy .xls needs xlrd, which is not a dependency; openpyxl reads these.
EXCEL_SUFFIXES = {".xlsx", ".xlsm"}


def _normalize_columns(frame: pd.DataFrame) -> pd.DataFrame:
    renamed = {col: str(col).strip().lower().replace(" ", "_") for col in frame.columns}
    return frame.rename(columns=renamed)


def load_sample_table(path: Path) -> pd.DataFrame:
    """
    Load a CSV or Excel (.xlsx/.xlsm) sample table.

    The table needs a numeric ``value`` column plus either a ``unit_id``
    column or ``asset_id`` and ``metric_id`` (optionally ``period``) columns,
    which are joined with ``-`` into a unit id. Non-numeric values are
    dropped.
    """

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".xls":
        raise SampleTableError(f"Legacy .xls sample tables are not supported; save {path} as .xlsx")
    try:
        if suffix in EXCEL_SUFFIXES:
            frame = pd.read_excel(path)
        else:
            frame = pd.read_csv(path)
    except (OSError, ValueError) as exc:
        raise SampleTableError(f"Unable to read sample table {path}: {exc}") from exc

    frame = _normalize_columns(frame)
    if VALUE_COLUMN not in frame.columns:
        raise SampleTableError(f"Sample table {path} has no '{VALUE_COLUMN}' column")

    if UNIT_COLUMN not in frame.columns:
        present = [col for col in _COMPOSITE_COLUMNS if col in frame.columns]
        if "asset_id" not in present or "metric_id" not in present:
            raise SampleTableError(
                f"Sample table {path} needs '{UNIT_COLUMN}' or 'asset_id' + 'metric_id' columns"
            )
        frame[UNIT_COLUMN] = frame[present].astype(str).agg("-".join, axis=1)

    frame[VALUE_COLUMN] = pd.to_numeric(frame[VALUE_COLUMN], errors="coerce")
    frame = frame.dropna(subset=[VALUE_COLUMN, UNIT_COLUMN]).copy()
    frame[UNIT_COLUMN] = frame[UNIT_COLUMN].astype(str).str.strip()
    return frame.reset_index(drop=True)


def group_samples(frame: pd.DataFrame) -> Dict[str, List[float]]:
    """Map each unit id to its samples, in order of first appearance."""

    grouped: Dict[str, List[float]] = OrderedDict()
    for unit_id, block in frame.groupby(UNIT_COLUMN, sort=False):
        grouped[str(unit_id)] = block[VALUE_COLUMN].astype(float).tolist()
    return grouped


def unit_metadata(frame: pd.DataFrame) -> Dict[str, Dict[str, str]]:
    """First ``asset_id``/``metric_id``/``label`` seen for each unit, where present."""

    meta: Dict[str, Dict[str, str]] = {}
    columns = [col for col in ("asset_id", "metric_id", "label") if col in frame.columns]
    if not columns:
        return meta
    first_rows = frame.drop_duplicates(subset=[UNIT_COLUMN], keep="first")
    for _, row in first_rows.iterrows():
        meta[str(row[UNIT_COLUMN])] = {col: str(row[col]) for col in columns if pd.notna(row[col])}
    return meta


__all__ = ["SampleTableError", "group_samples", "load_sample_table", "unit_metadata"]
