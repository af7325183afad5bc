import pandera as pa
from pandera.typing import Series

from tcrit.models.fluorcam_raw import WELL_ID_REGEX


class WellLabels(pa.DataFrameModel):
    well: Series[str] = pa.Field(str_matches=WELL_ID_REGEX, unique=True)
