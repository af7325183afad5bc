import pandera as pa
from pandera.typing import Series

from tcrit.models.fluorcam_raw import WELL_ID_REGEX

STATUS_OK = "ok"
STATUS_DEGENERATE_SCALE = "degenerate_scale"
STATUS_CONVERGENCE_FAILURE = "convergence_failure"
WELL_STATUSES = (STATUS_OK, STATUS_DEGENERATE_SCALE, STATUS_CONVERGENCE_FAILURE)

METRIC_COLUMNS = ["Tmax", "T50", "Tcrit", "Tcrit_se"]


class TcritResults(pa.DataFrameModel):
    well: Series[str] = pa.Field(str_matches=WELL_ID_REGEX, unique=True)
    Tmax: Series[float] = pa.Field(nullable=True)
    T50: Series[float] = pa.Field(nullable=True)
    Tcrit: Series[float] = pa.Field(nullable=True)
    # Tcrit_se is zero for noiseless traces
    Tcrit_se: Series[float] = pa.Field(ge=0, nullable=True)
    status: Series[str] = pa.Field(isin=list(WELL_STATUSES))
