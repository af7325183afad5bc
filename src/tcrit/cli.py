"""
Command line entry point.

Usage:
  tcrit analyze data_raw/run1.TXT --labels data_labels/run1.csv --output-dir data_processed
  tcrit process-new --root .
"""

import argparse
import logging
import sys
from pathlib import Path

from tcrit.config import BIN_REMAINDER_POLICIES, TcritConfig
from tcrit.exceptions import TcritError
from tcrit.logger import setup_logger
from tcrit.runner import get_output_paths, process_new_file, run_file

logger = logging.getLogger(__name__)


def _add_analysis_arguments(p: argparse.ArgumentParser) -> None:
    defaults = TcritConfig()
    p.add_argument("--no-plots", action="store_true", help="Skip the per-well PNG plots.")
    p.add_argument("--time-column", default=None, help="Header of the time column.")
    p.add_argument("--temperature-column", default=None, help="Header of the temperature column.")
    p.add_argument("--bin-size", type=int, default=defaults.bin_size)
    p.add_argument(
        "--bin-remainder",
        choices=BIN_REMAINDER_POLICIES,
        default=defaults.bin_remainder,
        help="Fail on, or drop, readings that do not fill the last bin.",
    )
    p.add_argument("--iqr-factor", type=float, default=defaults.outlier_iqr_factor)
    p.add_argument("--prebuffer", type=float, default=defaults.prebuffer, help="°C below T50.")
    p.add_argument("--postbuffer", type=float, default=defaults.postbuffer, help="°C above T50.")
    p.add_argument("--max-iterations", type=int, default=defaults.max_iterations)
    p.add_argument("--n-jobs", type=int, default=defaults.n_jobs, help="Worker processes.")
    p.add_argument("-v", "--verbose", action="store_true", help="Verbose logging.")
    p.add_argument("--log-file", type=Path, default=None)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tcrit",
        description="Tcrit, T50 and Tmax from FluorCam chlorophyll fluorescence ramps.",
    )
    sub = p.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyze one raw FluorCam file.")
    analyze.add_argument("raw_file", type=Path)
    analyze.add_argument("--labels", type=Path, default=None, help="Well label CSV.")
    analyze.add_argument(
        "--output-dir", type=Path, default=None, help="Default: next to the raw file."
    )
    _add_analysis_arguments(analyze)

    process_new = sub.add_parser(
        "process-new", help="Analyze the next unprocessed file of a workspace."
    )
    process_new.add_argument("--root", type=Path, default=Path("."), help="Workspace root.")
    _add_analysis_arguments(process_new)

    return p


def _config_from_args(args: argparse.Namespace) -> TcritConfig:
    return TcritConfig(
        bin_size=args.bin_size,
        bin_remainder=args.bin_remainder,
        outlier_iqr_factor=args.iqr_factor,
        prebuffer=args.prebuffer,
        postbuffer=args.postbuffer,
        max_iterations=args.max_iterations,
        n_jobs=args.n_jobs,
    )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    run_kwargs = dict(
        plots=not args.no_plots,
        time_column=args.time_column,
        temperature_column=args.temperature_column,
    )

    try:
        run_kwargs["config"] = _config_from_args(args)
        if args.command == "analyze":
            paths = get_output_paths(args.raw_file, args.output_dir, args.labels)
            run_file(paths, require_labels=True, **run_kwargs)
        else:
            process_new_file(args.root, **run_kwargs)
    except (TcritError, FileNotFoundError, ValueError) as e:
        logger.error("%s", e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
