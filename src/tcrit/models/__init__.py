from tcrit.models.fluorcam_raw import WELL_ID_REGEX, FluorCamRaw
from tcrit.models.tcrit_results import (
    METRIC_COLUMNS,
    STATUS_CONVERGENCE_FAILURE,
    STATUS_DEGENERATE_SCALE,
    STATUS_OK,
    WELL_STATUSES,
    TcritResults,
)
from tcrit.models.well_labels import WellLabels
from tcrit.models.well_series_model import WellSeries

__all__ = [
    "FluorCamRaw",
    "METRIC_COLUMNS",
    "STATUS_CONVERGENCE_FAILURE",
    "STATUS_DEGENERATE_SCALE",
    "STATUS_OK",
    "TcritResults",
    "WELL_ID_REGEX",
    "WELL_STATUSES",
    "WellLabels",
    "WellSeries",
]
