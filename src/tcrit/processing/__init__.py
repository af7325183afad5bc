from tcrit.processing.assembly import assemble_results, get_results_table
from tcrit.processing.binning import bin_readings
from tcrit.processing.breakpoint import BreakpointFit, fit_breakpoint, get_fit_window
from tcrit.processing.landmarks import Landmarks, get_landmarks
from tcrit.processing.outliers import flag_outliers, get_outlier_threshold, remove_outliers
from tcrit.processing.pipeline import WellResult, analyze_well, analyze_wells, run_pipeline
from tcrit.processing.scaling import ScaledSeries, rescale_well

__all__ = [
    "BreakpointFit",
    "Landmarks",
    "ScaledSeries",
    "WellResult",
    "analyze_well",
    "analyze_wells",
    "assemble_results",
    "bin_readings",
    "fit_breakpoint",
    "flag_outliers",
    "get_fit_window",
    "get_landmarks",
    "get_outlier_threshold",
    "get_results_table",
    "remove_outliers",
    "rescale_well",
    "run_pipeline",
]
