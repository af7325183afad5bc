import logging
from pathlib import Path

import pandas as pd

from tcrit.config import TcritConfig
from tcrit.models import STATUS_OK
from tcrit.parsers import FluorCamParser, WellLabelParser
from tcrit.processing import assemble_results, run_pipeline
from tcrit.utils.workspace import RunPaths, ensure_workspace, find_new_raw_files, get_run_paths
from tcrit.visualization import create_plate_heatmap, save_well_plots

logger = logging.getLogger(__name__)


def get_output_paths(
    raw_file: Path, output_dir: Path | None = None, label_file: Path | None = None
) -> RunPaths:
    """Paths for a raw file analyzed outside a workspace.

    The plot directory is named after the raw file and the table after its stem, both in
    ``output_dir`` (the raw file's directory by default). The table is named
    ``<stem>_tcrit.csv`` instead when ``<stem>.csv`` is the raw or the label file.
    """
    if output_dir is None:
        output_dir = raw_file.parent

    inputs = {raw_file.resolve()}
    if label_file is not None:
        inputs.add(label_file.resolve())

    results_file = output_dir / f"{raw_file.stem}.csv"
    if results_file.resolve() in inputs:
        results_file = output_dir / f"{raw_file.stem}_tcrit.csv"

    return RunPaths(
        raw_file=raw_file,
        label_file=label_file,
        plot_dir=output_dir / raw_file.name,
        results_file=results_file,
    )


def run_file(
    paths: RunPaths,
    config: TcritConfig | None = None,
    plots: bool = True,
    require_labels: bool = False,
    time_column: str | None = None,
    temperature_column: str | None = None,
) -> pd.DataFrame:
    """Analyze one FluorCam export and write its results table (and plots).

    Args:
        paths: Raw file, label file and output locations. No labels are joined when
            ``paths.label_file`` is None.
        config: Analysis parameters, defaults to ``TcritConfig()``
        plots: Write one PNG per well plus a Tcrit plate heatmap
        require_labels: Fail if the label file is missing instead of continuing without it
        time_column: Header of the time column, first column if None
        temperature_column: Header of the temperature column, second column if None

    Returns:
        pd.DataFrame: The table written to ``paths.results_file``
    """
    if config is None:
        config = TcritConfig()

    raw = FluorCamParser(
        paths.raw_file, time_column=time_column, temperature_column=temperature_column
    ).parse()

    labels = None
    if paths.label_file is not None:
        if require_labels or paths.label_file.is_file():
            labels = WellLabelParser(paths.label_file).parse()
        else:
            logger.warning("No label file at %s, writing results without labels", paths.label_file)

    results = run_pipeline(raw, config)
    table = assemble_results(results, labels)

    n_ok = int((table["status"] == STATUS_OK).sum())
    logger.info("Tcrit found for %d of %d wells", n_ok, len(table))

    paths.results_file.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(paths.results_file, index=False, na_rep="NA")
    logger.info("Results written to %s", paths.results_file)

    if plots:
        save_well_plots(results, paths.plot_dir)
        create_plate_heatmap(results, metric="tcrit").write_image(
            paths.plot_dir / "plate_Tcrit.png"
        )

    return table


def process_new_file(root: Path, **run_kwargs) -> pd.DataFrame | None:
    """Analyze the first unprocessed export of a workspace, if there is one.

    Only one file is processed per call. Further new files are left for later calls.
    """
    ensure_workspace(root)

    new_files = find_new_raw_files(root)
    if not new_files:
        logger.info("No new raw files in %s", root)
        return None

    raw_name = new_files[0]
    if len(new_files) > 1:
        logger.info(
            "%d more new raw files waiting: %s", len(new_files) - 1, ", ".join(new_files[1:])
        )

    logger.info("Processing %s", raw_name)
    return run_file(get_run_paths(root, raw_name), **run_kwargs)
