import logging
import re
from pathlib import Path

import pandas as pd
import pandera as pa

from tcrit.exceptions import MalformedInputError
from tcrit.models import WELL_ID_REGEX, FluorCamRaw
from tcrit.parsers.base_parser import BaseParser

logger = logging.getLogger(__name__)

DEFAULT_SKIPROWS = 2


class FluorCamParser(BaseParser):
    """Parser for FluorCam temperature ramp exports.

    The file is whitespace delimited. The first ``skiprows`` lines are a preamble, the next
    line is the header. Time and temperature are taken from the named columns when
    ``time_column`` and ``temperature_column`` are given, otherwise from the first two
    columns. Every other column must be named by a well position (e.g. "A1").
    """

    def __init__(
        self,
        file_path: Path,
        skiprows: int = DEFAULT_SKIPROWS,
        time_column: str | None = None,
        temperature_column: str | None = None,
    ):
        super().__init__(file_path)
        self.skiprows = skiprows
        self.time_column = time_column
        self.temperature_column = temperature_column

    def parse(self) -> pd.DataFrame:
        self._validate_path()
        df = self._read_file()
        self._validate_raw_data(df)
        df = self._process_raw_data(df)
        df = self._validate_processed_data(df)
        logger.info(
            "Parsed %d readings for %d wells from %s",
            len(df),
            len(df.columns) - 2,
            self.file_path,
        )
        return df

    def _read_file(self) -> pd.DataFrame:
        try:
            return pd.read_csv(self.file_path, skiprows=self.skiprows, sep=r"\s+")
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise MalformedInputError(f"Could not read {self.file_path}: {e}") from e

    def _resolve_column(self, df: pd.DataFrame, name: str | None, position: int) -> str:
        if name is None:
            if len(df.columns) <= position:
                raise MalformedInputError(
                    f"{self.file_path} has {len(df.columns)} columns, expected time, "
                    "temperature and at least one well"
                )
            return str(df.columns[position])
        if name not in df.columns:
            raise MalformedInputError(f"Column {name!r} not found in {self.file_path}")
        return name

    def _validate_raw_data(self, df: pd.DataFrame) -> None:
        time_col = self._resolve_column(df, self.time_column, 0)
        temp_col = self._resolve_column(df, self.temperature_column, 1)
        if time_col == temp_col:
            raise MalformedInputError("Time and temperature must be different columns")

        well_cols = [str(c) for c in df.columns if c not in (time_col, temp_col)]
        if not well_cols:
            raise MalformedInputError(f"No well columns found in {self.file_path}")

        bad_cols = [c for c in well_cols if not re.match(WELL_ID_REGEX, c)]
        if bad_cols:
            raise MalformedInputError(
                f"Columns {bad_cols} in {self.file_path} are not valid well positions"
            )

    def _process_raw_data(self, df: pd.DataFrame) -> pd.DataFrame:
        """Bind time and temperature by name and put them first"""
        time_col = self._resolve_column(df, self.time_column, 0)
        temp_col = self._resolve_column(df, self.temperature_column, 1)

        df = df.rename(columns={time_col: "time", temp_col: "temperature"})
        well_cols = [c for c in df.columns if c not in ("time", "temperature")]

        return df.loc[:, ["time", "temperature", *well_cols]]

    def _validate_processed_data(self, df: pd.DataFrame) -> pd.DataFrame:
        try:
            return FluorCamRaw.validate(df)
        except (pa.errors.SchemaError, pa.errors.SchemaErrors) as e:
            raise MalformedInputError(f"Invalid FluorCam data in {self.file_path}: {e}") from e
