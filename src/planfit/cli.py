import argparse
import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd
from dotenv import load_dotenv

from .analysis import active_family, apply_global_settings, create_unit
from .config import Config
from .config import load_config as load_runtime_config
from .filters import audit_frame
from .models import AnalysisUnit, DistributionChoice
from .reporting import export_frame, make_summary_text
from .sample_data import generate_analysis_units
from .samples_io import SampleTableError, group_samples, load_sample_table, unit_metadata

logger = logging.getLogger(__name__)


def _load_units(runtime_config: Config) -> List[AnalysisUnit]:
    if runtime_config.synthetic:
        logger.info(
            "Generating synthetic samples: %s months from %s (seed=%s)",
            runtime_config.months,
            runtime_config.start_date,
            runtime_config.seed,
        )
        return generate_analysis_units(
            start=runtime_config.start_date,
            months=runtime_config.months,
            seed=runtime_config.seed,
        )

    frame = load_sample_table(runtime_config.samples_path)
    meta = unit_metadata(frame)
    units = []
    for unit_id, samples in group_samples(frame).items():
        info = meta.get(unit_id, {})
        units.append(
            create_unit(
                unit_id,
                samples,
                planned_p50=runtime_config.planned_p50,
                asset_id=info.get("asset_id", ""),
                metric_id=info.get("metric_id", ""),
                label=info.get("label", ""),
            )
        )
    return units


def _write_audit(units: Sequence[AnalysisUnit], path: Path) -> None:
    frames = []
    for unit in units:
        frame = audit_frame(unit.raw_samples, unit.filter_config)
        frame.insert(0, "unit_id", unit.unit_id)
        frames.append(frame)
    combined = pd.concat(frames, ignore_index=True) if frames else pd.DataFrame()
    path.parent.mkdir(parents=True, exist_ok=True)
    combined.to_csv(path, index=False)


def run(runtime_config: Optional[Config] = None) -> int:
    cfg = runtime_config or load_runtime_config(os.environ, None)

    if not cfg.synthetic and not cfg.samples_path.exists():
        logger.error("Sample table not found: %s", cfg.samples_path)
        return 2
    try:
        units = _load_units(cfg)
    except SampleTableError as exc:
        logger.error("%s", exc)
        return 2

    units = apply_global_settings(
        units,
        cfg.filter_config,
        cfg.distribution,
        max_workers=cfg.max_workers,
    )

    for unit in units:
        logger.debug(
            "[unit] %s :: n=%d/%d mean=%.4f std=%.4f fit=%s status=%s%s",
            unit.unit_id,
            len(unit.filtered_samples),
            len(unit.raw_samples),
            unit.distribution.mean,
            unit.distribution.std_dev,
            active_family(unit).value,
            unit.status.value,
            f" ({unit.status_message})" if unit.status_message else "",
        )

    logger.info("\n=== SUMMARY ===\n")
    logger.info("%s", make_summary_text(units))
    fc = cfg.filter_config
    logger.info("Filter settings:")
    logger.info(" - Trim bottom/top: %s%% / %s%%", fc.trim_bottom_pct, fc.trim_top_pct)
    logger.info(" - Sigma filter: %s", fc.sigma_filter if fc.sigma_filter > 0 else "off")
    logger.info(" - Absolute bounds: %s to %s", fc.absolute_min, fc.absolute_max)
    if cfg.distribution is not DistributionChoice.AUTO:
        logger.info(" - Distribution override: %s", cfg.distribution.value)

    if cfg.output_path or cfg.audit_output_path:
        logger.info("\nOutputs written:")
    if cfg.output_path:
        cfg.output_path.parent.mkdir(parents=True, exist_ok=True)
        export_frame(units).to_csv(cfg.output_path, index=False)
        logger.info(" - %s", cfg.output_path)
    if cfg.audit_output_path:
        _write_audit(units, cfg.audit_output_path)
        logger.info(" - %s", cfg.audit_output_path)
    return 0


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Fit planning distributions to historical samples with outlier filtering"
    )
    parser.add_argument("--samples", help="CSV/XLSX sample table (unit_id,value rows)")
    parser.add_argument("--synthetic", action="store_true", help="Analyse generated sample data")
    parser.add_argument("--trim-bottom", type=float, help="Percent of lowest samples to trim (0-25)")
    parser.add_argument("--trim-top", type=float, help="Percent of highest samples to trim (0-25)")
    parser.add_argument("--sigma", type=float, help="Sigma clipping threshold (0 disables)")
    parser.add_argument("--absolute-min", type=float, help="Drop samples below this value")
    parser.add_argument("--absolute-max", type=float, help="Drop samples above this value")
    parser.add_argument(
        "--distribution",
        choices=[choice.value for choice in DistributionChoice],
        help="Distribution to use instead of the best fit",
    )
    parser.add_argument("--planned-p50", type=float, help="Planned P50 applied to every unit")
    parser.add_argument("--seed", type=int, help="Random seed for synthetic data")
    parser.add_argument("--months", type=int, help="Planning months for synthetic data")
    parser.add_argument("--start-date", help="Planning start date for synthetic data (YYYY-MM-DD)")
    parser.add_argument("--output", help="Write the distribution export table to this CSV")
    parser.add_argument("--audit-output", help="Write per-sample exclusion reasons to this CSV")
    parser.add_argument("--max-workers", type=int, help="Recompute units on a thread pool")
    parser.add_argument("-v", "--verbose", action="store_true", help="Increase logging verbosity")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    runtime_cfg = load_runtime_config(os.environ, args)
    log_level = logging.DEBUG if runtime_cfg.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(message)s")
    try:
        return run(runtime_config=runtime_cfg)
    except Exception:  # pragma: no cover - defensive
        logger.exception("Fatal error during distribution fitting")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
