"""Directory conventions of a FluorCam analysis workspace.

A workspace root holds ``data_raw/`` (instrument exports), ``data_labels/`` (one label CSV
per export, same base name) and ``data_processed/`` (one plot directory named after the
export and one results table per export). An export is new when nothing in
``data_processed/`` carries its name. This check is not atomic, so two runs started at the
same time on the same workspace can pick the same file.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

RAW_DIR = "data_raw"
PROCESSED_DIR = "data_processed"
LABELS_DIR = "data_labels"


@dataclass(frozen=True)
class RunPaths:
    raw_file: Path
    label_file: Path | None
    plot_dir: Path
    results_file: Path


def ensure_workspace(root: Path) -> None:
    for name in (RAW_DIR, PROCESSED_DIR, LABELS_DIR):
        directory = root / name
        if not directory.is_dir():
            directory.mkdir(parents=True)
            logger.info("Created %s", directory)


def find_new_raw_files(root: Path) -> list[str]:
    """Names of raw files in data_raw/ without a counterpart in data_processed/, sorted."""
    raw_dir = root / RAW_DIR
    processed_dir = root / PROCESSED_DIR
    if not raw_dir.is_dir():
        return []

    processed = set()
    if processed_dir.is_dir():
        for path in processed_dir.iterdir():
            processed.add(path.name)
            processed.add(path.stem)

    return sorted(
        path.name
        for path in raw_dir.iterdir()
        if path.is_file()
        and not path.name.startswith(".")
        and path.name not in processed
        and path.stem not in processed
    )


def get_run_paths(root: Path, raw_name: str) -> RunPaths:
    stem = Path(raw_name).stem
    return RunPaths(
        raw_file=root / RAW_DIR / raw_name,
        label_file=root / LABELS_DIR / f"{stem}.csv",
        plot_dir=root / PROCESSED_DIR / raw_name,
        results_file=root / PROCESSED_DIR / f"{stem}.csv",
    )
