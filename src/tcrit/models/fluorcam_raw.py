import pandera as pa
from pandera.typing import Series

# rows A-H, columns 1-99
WELL_ID_REGEX = r"^[A-H](?:[1-9]|[1-9][0-9])$"


class FluorCamRaw(pa.DataFrameModel):
    time: Series[float] = pa.Field()
    temperature: Series[float] = pa.Field(ge=-20, le=100)

    # one fluorescence column per well, named by its plate position
    well: Series[float] = pa.Field(alias=WELL_ID_REGEX, regex=True)

    class Config:
        coerce = True
