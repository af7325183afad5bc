import numpy as np
import pandas as pd
from scipy.stats import iqr


def get_outlier_threshold(fluorescence: np.ndarray | pd.Series, iqr_factor: float = 3.0) -> float:
    """Upper outlier threshold: median + iqr_factor * IQR"""
    values = np.asarray(fluorescence, dtype=float)
    return float(np.median(values) + iqr_factor * iqr(values))


def flag_outliers(series: pd.DataFrame, iqr_factor: float = 3.0) -> pd.DataFrame:
    """Flag binned fluorescence values that are upper outliers within their own well.

    The threshold is computed over the whole well series, including the points that end
    up flagged. Only values strictly above the threshold are flagged.

    Args:
        series: Long well series with ``well_position`` and ``fluorescence`` columns
        iqr_factor: Number of interquartile ranges above the median

    Returns:
        pd.DataFrame: Copy of ``series`` with ``fluorescence_threshold`` and ``outlier`` added
    """
    flagged = series.copy()
    flagged["fluorescence_threshold"] = flagged.groupby("well_position", sort=False)[
        "fluorescence"
    ].transform(lambda f: get_outlier_threshold(f, iqr_factor))
    flagged["outlier"] = flagged["fluorescence"] > flagged["fluorescence_threshold"]

    return flagged


def remove_outliers(flagged: pd.DataFrame) -> pd.DataFrame:
    """Drop flagged rows. Remaining rows keep their order."""
    return flagged.loc[~flagged["outlier"]].reset_index(drop=True)
