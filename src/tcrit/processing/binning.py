import logging

import numpy as np
import pandas as pd

from tcrit.exceptions import MalformedInputError
from tcrit.models import WellSeries

logger = logging.getLogger(__name__)


def get_temperature_bins(n_readings: int, bin_size: int = 5, remainder: str = "error") -> np.ndarray:
    """Assign consecutive readings to 1-based bins of ``bin_size``.

    Readings left over after the last full bin get bin 0 when ``remainder`` is "truncate".

    Raises:
        MalformedInputError: If there are fewer readings than one bin, or the reading count
            is not a multiple of ``bin_size`` and ``remainder`` is "error".
    """
    if bin_size < 1:
        raise MalformedInputError(f"Bin size must be at least 1, got {bin_size}")
    if n_readings < bin_size:
        raise MalformedInputError(
            f"Need at least {bin_size} readings to form one temperature bin, got {n_readings}"
        )

    n_bins, n_left_over = divmod(n_readings, bin_size)
    if n_left_over:
        if remainder == "error":
            raise MalformedInputError(
                f"{n_readings} readings cannot be split evenly into bins of {bin_size}"
            )
        if remainder != "truncate":
            raise ValueError(f"Unknown remainder policy: {remainder!r}")
        logger.warning(
            "Dropping last %d of %d readings that do not fill a bin of %d",
            n_left_over,
            n_readings,
            bin_size,
        )

    bins = np.zeros(n_readings, dtype=int)
    bins[: n_bins * bin_size] = np.repeat(np.arange(1, n_bins + 1), bin_size)
    return bins


def bin_readings(raw: pd.DataFrame, bin_size: int = 5, remainder: str = "error") -> pd.DataFrame:
    """Average raw readings over fixed-size temperature bins, per well.

    Binning is positional (by row order). Within a bin the temperature is averaged once and
    each well's fluorescence is averaged independently.

    Args:
        raw: Wide readings with ``time``, ``temperature`` and one column per well
        bin_size: Number of consecutive readings per bin
        remainder: "error" or "truncate", see ``get_temperature_bins``

    Returns:
        pd.DataFrame: Long table with columns well_position, temperature_bin, temperature,
        fluorescence, ordered by well (in input column order) and bin
    """
    well_cols = [c for c in raw.columns if c not in ("time", "temperature")]

    binned = raw.drop(columns="time").reset_index(drop=True)
    binned["temperature_bin"] = get_temperature_bins(len(binned), bin_size, remainder)
    binned = binned.loc[binned["temperature_bin"] > 0]

    means = binned.groupby("temperature_bin", sort=True).mean()

    long = means.reset_index().melt(
        id_vars=["temperature_bin", "temperature"],
        value_vars=well_cols,
        var_name="well_position",
        value_name="fluorescence",
    )
    long = long.loc[:, ["well_position", "temperature_bin", "temperature", "fluorescence"]]
    long["well_position"] = long["well_position"].astype(str)
    long["temperature_bin"] = long["temperature_bin"].astype(int)
    long = long.reset_index(drop=True)

    return WellSeries.validate(long)
