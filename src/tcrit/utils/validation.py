from typing import Iterable

import pandas as pd

from tcrit.exceptions import MalformedInputError


def validate_temperature_range(min_temp: float | None, max_temp: float | None) -> bool:
    """Validate the bounds of a temperature window.

    Args:
        min_temp: Lower bound in °C or None
        max_temp: Upper bound in °C or None

    Returns:
        bool: True if both bounds are given and ordered, False if either is missing

    Raises:
        ValueError: If both bounds are given but min_temp >= max_temp
    """
    if min_temp is None or max_temp is None:
        return False
    if min_temp >= max_temp:
        raise ValueError(f"min_temp ({min_temp}) must be less than max_temp ({max_temp})")
    return True


def validate_label_columns(labels: pd.DataFrame, reserved: Iterable[str]) -> None:
    """Reject label tables whose columns would overwrite result columns after a join."""
    clashes = sorted(set(labels.columns) & set(reserved))
    if clashes:
        raise MalformedInputError(f"Label columns {clashes} clash with result columns")
