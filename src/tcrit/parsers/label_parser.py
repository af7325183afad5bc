import logging

import pandas as pd
import pandera as pa

from tcrit.exceptions import MalformedInputError
from tcrit.models import WellLabels
from tcrit.parsers.base_parser import BaseParser

logger = logging.getLogger(__name__)


class WellLabelParser(BaseParser):
    """Parser for the per-well identifier CSV (a ``well`` column plus any label columns)."""

    def parse(self) -> pd.DataFrame:
        self._validate_path()
        df = self._read_file()
        self._validate_raw_data(df)
        df = self._process_raw_data(df)
        df = self._validate_processed_data(df)
        logger.info("Loaded labels for %d wells from %s", len(df), self.file_path)
        return df

    def _read_file(self) -> pd.DataFrame:
        try:
            return pd.read_csv(self.file_path, dtype=str, keep_default_na=False, na_values=[""])
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise MalformedInputError(f"Could not read {self.file_path}: {e}") from e

    def _validate_raw_data(self, df: pd.DataFrame) -> None:
        if "well" not in df.columns:
            raise MalformedInputError(f"Label file {self.file_path} has no 'well' column")

    def _process_raw_data(self, df: pd.DataFrame) -> pd.DataFrame:
        df = df.copy()
        df["well"] = df["well"].str.strip()
        return df

    def _validate_processed_data(self, df: pd.DataFrame) -> pd.DataFrame:
        try:
            return WellLabels.validate(df)
        except (pa.errors.SchemaError, pa.errors.SchemaErrors) as e:
            raise MalformedInputError(f"Invalid label file {self.file_path}: {e}") from e
