import pandera as pa
from pandera.typing import Series

from tcrit.models.fluorcam_raw import WELL_ID_REGEX


class WellSeries(pa.DataFrameModel):
    well_position: Series[str] = pa.Field(str_matches=WELL_ID_REGEX)
    temperature_bin: Series[int] = pa.Field(ge=1)
    temperature: Series[float] = pa.Field()
    fluorescence: Series[float] = pa.Field()
