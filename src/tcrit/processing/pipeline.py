import logging
import multiprocessing as mp
from dataclasses import dataclass

import numpy as np
import pandas as pd

from tcrit.config import TcritConfig
from tcrit.exceptions import ConvergenceError, DegenerateScaleError
from tcrit.models import STATUS_CONVERGENCE_FAILURE, STATUS_DEGENERATE_SCALE, STATUS_OK
from tcrit.processing.binning import bin_readings
from tcrit.processing.breakpoint import BreakpointFit, fit_breakpoint, get_fit_window
from tcrit.processing.landmarks import Landmarks, get_landmarks
from tcrit.processing.outliers import flag_outliers, remove_outliers
from tcrit.processing.scaling import ScaledSeries, rescale_well
from tcrit.utils.utils import sort_well_ids

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WellResult:
    """Outcome of the pipeline for one well.

    Attributes:
        well_position: Well id, e.g. "A1".
        status: "ok", "degenerate_scale" or "convergence_failure".
        tmax: Temperature at peak scaled fluorescence, NaN if the trace is flat.
        t50: Temperature at half rise, NaN if the trace is flat.
        tcrit: Breakpoint temperature, NaN unless status is "ok".
        tcrit_se: Standard error of tcrit, NaN unless status is "ok".
        message: Reason for a non-"ok" status.
        scaled: Rescaled series, None if rescaling failed.
        landmarks: Tmax/T50, None if rescaling failed.
        fit: Breakpoint fit, None unless status is "ok".
    """

    well_position: str
    status: str
    tmax: float = np.nan
    t50: float = np.nan
    tcrit: float = np.nan
    tcrit_se: float = np.nan
    message: str = ""
    scaled: ScaledSeries | None = None
    landmarks: Landmarks | None = None
    fit: BreakpointFit | None = None


def analyze_well(
    well_position: str,
    temperature: np.ndarray | pd.Series,
    fluorescence: np.ndarray | pd.Series,
    config: TcritConfig | None = None,
) -> WellResult:
    """Rescale one outlier-filtered well, locate its landmarks and fit its breakpoint.

    Degenerate traces and failed fits are recorded in the returned status instead of
    being raised, so one bad well never stops a run.
    """
    if config is None:
        config = TcritConfig()

    try:
        scaled = rescale_well(temperature, fluorescence)
    except DegenerateScaleError as e:
        logger.warning("Well %s: %s failed: %s", well_position, e.stage, e)
        return WellResult(well_position, STATUS_DEGENERATE_SCALE, message=str(e))

    landmarks = get_landmarks(scaled.temperature, scaled.fluor_scale)
    partial = dict(
        well_position=well_position,
        tmax=landmarks.tmax,
        t50=landmarks.t50,
        scaled=scaled,
        landmarks=landmarks,
    )

    if not scaled.is_rising:
        message = (
            f"Peak at {scaled.temp_at_max:.2f} does not follow baseline at "
            f"{scaled.temp_at_min:.2f}, trace is not rising"
        )
        logger.warning("Well %s: %s failed: %s", well_position, DegenerateScaleError.stage, message)
        return WellResult(status=STATUS_DEGENERATE_SCALE, message=message, **partial)

    window_temp, window_scale = get_fit_window(
        scaled.temperature,
        scaled.fluor_scale,
        landmarks.t50,
        prebuffer=config.prebuffer,
        postbuffer=config.postbuffer,
    )

    try:
        fit = fit_breakpoint(
            window_temp,
            window_scale,
            max_iter=config.max_iterations,
            tol=config.tolerance,
            min_points=config.min_window_points,
        )
    except ConvergenceError as e:
        logger.warning("Well %s: %s failed: %s", well_position, e.stage, e)
        return WellResult(status=STATUS_CONVERGENCE_FAILURE, message=str(e), **partial)

    logger.info("Well %s complete", well_position)

    return WellResult(
        status=STATUS_OK, tcrit=fit.tcrit, tcrit_se=fit.tcrit_se, fit=fit, **partial
    )


def _split_wells(filtered: pd.DataFrame) -> list[tuple[str, np.ndarray, np.ndarray]]:
    wells = sort_well_ids(filtered["well_position"].unique())
    grouped = filtered.groupby("well_position", sort=False)

    well_args = []
    for well in wells:
        well_data = grouped.get_group(well).sort_values("temperature_bin", kind="stable")
        well_args.append(
            (
                well,
                well_data["temperature"].to_numpy(dtype=float),
                well_data["fluorescence"].to_numpy(dtype=float),
            )
        )
    return well_args


def analyze_wells(
    filtered: pd.DataFrame, config: TcritConfig | None = None
) -> dict[str, WellResult]:
    """Run ``analyze_well`` for every well of an outlier-filtered series.

    Wells are independent, so with ``config.n_jobs > 1`` they are spread over a process
    pool. The returned mapping is in plate order either way.
    """
    if config is None:
        config = TcritConfig()

    well_args = _split_wells(filtered)

    if config.n_jobs == 1 or len(well_args) <= 1:
        results = [analyze_well(*args, config) for args in well_args]
    else:
        n_processes = min(config.n_jobs, len(well_args))
        with mp.Pool(processes=n_processes) as pool:
            results = pool.starmap(analyze_well, [(*args, config) for args in well_args])

    return {result.well_position: result for result in results}


def run_pipeline(raw: pd.DataFrame, config: TcritConfig | None = None) -> dict[str, WellResult]:
    """Bin, outlier-filter and analyze every well of a parsed FluorCam run"""
    if config is None:
        config = TcritConfig()

    binned = bin_readings(raw, bin_size=config.bin_size, remainder=config.bin_remainder)
    flagged = flag_outliers(binned, iqr_factor=config.outlier_iqr_factor)

    n_outliers = int(flagged["outlier"].sum())
    if n_outliers:
        outlier_wells = sort_well_ids(flagged.loc[flagged["outlier"], "well_position"].unique())
        logger.info("Removed %d outlier bins in wells %s", n_outliers, ", ".join(outlier_wells))

    return analyze_wells(remove_outliers(flagged), config)
