from __future__ import annotations

from planfit.analysis import create_unit, set_ignored
from planfit.reporting import EXPORT_COLUMNS, export_frame, make_summary_text


def _units():
    kept = create_unit("t1-m1-0", [28.0, 30.0, 31.0, 29.0, 32.0, 30.5], asset_id="t1", metric_id="m1", label="Jan 2024")
    ignored = set_ignored(create_unit("t2-m1-0", [1.0, 2.0], asset_id="t2", metric_id="m1", label="Jan 2024"))
    raw = create_unit("custom", [5.0, 6.0, 7.0, 8.0, 9.0])
    return [kept, ignored, raw]


def test_export_skips_ignored_units():
    frame = export_frame(_units())
    assert list(frame.columns) == EXPORT_COLUMNS
    assert frame["Asset"].tolist() == ["Truck 001", "custom"]
    assert frame["Metric"].tolist() == ["Meal Break", ""]
    assert frame.loc[0, "Period"] == "Jan 2024"
    assert frame.loc[1, "Mean"] == 7.0


def test_export_empty():
    frame = export_frame([])
    assert frame.empty
    assert list(frame.columns) == EXPORT_COLUMNS


def test_summary_counts_statuses():
    text = make_summary_text(_units())
    assert "Analysed 3 units (1 ignored)" in text
    assert "Error=1" in text
