from dataclasses import dataclass

import numpy as np
import pandas as pd

from tcrit.exceptions import DegenerateScaleError


@dataclass(frozen=True)
class ScaledSeries:
    """Outlier-filtered well series rescaled to [0, 1].

    Attributes:
        temperature: Bin temperatures, in series order.
        fluorescence: Binned fluorescence, in series order.
        fluor_scale: (fluorescence - fluor_min) / (fluor_max - fluor_min).
        fluor_min: Minimum fluorescence at or below temp_at_max.
        fluor_max: Global maximum fluorescence.
        temp_at_min: Temperature of fluor_min (first occurrence).
        temp_at_max: Temperature of fluor_max (first occurrence).
        is_rising: temp_at_max > temp_at_min. False means the trace is flat or inverted
            and a breakpoint fit is not meaningful.
    """

    temperature: np.ndarray
    fluorescence: np.ndarray
    fluor_scale: np.ndarray
    fluor_min: float
    fluor_max: float
    temp_at_min: float
    temp_at_max: float
    is_rising: bool


def rescale_well(
    temperature: np.ndarray | pd.Series, fluorescence: np.ndarray | pd.Series
) -> ScaledSeries:
    """Rescale one well between its baseline minimum and its peak.

    The minimum is searched only among points at temperatures up to the peak, so
    post-peak decay is never taken as the baseline. Values after the peak are not
    clipped and may fall below 0.

    Raises:
        DegenerateScaleError: If the series is empty or fluor_max equals fluor_min
    """
    temperature = np.asarray(temperature, dtype=float)
    fluorescence = np.asarray(fluorescence, dtype=float)

    if fluorescence.size == 0:
        raise DegenerateScaleError("No fluorescence values left to rescale")

    max_idx = int(np.argmax(fluorescence))
    fluor_max = float(fluorescence[max_idx])
    temp_at_max = float(temperature[max_idx])

    pre_peak_idx = np.flatnonzero(temperature <= temp_at_max)
    min_idx = int(pre_peak_idx[np.argmin(fluorescence[pre_peak_idx])])
    fluor_min = float(fluorescence[min_idx])
    temp_at_min = float(temperature[min_idx])

    fluor_range = fluor_max - fluor_min
    if fluor_range == 0:
        raise DegenerateScaleError(
            f"Fluorescence maximum equals baseline minimum ({fluor_max:g}), trace is flat"
        )

    fluor_scale = (fluorescence - fluor_min) / fluor_range
    # exact landmarks regardless of rounding in the division
    fluor_scale[max_idx] = 1.0
    fluor_scale[min_idx] = 0.0

    return ScaledSeries(
        temperature=temperature,
        fluorescence=fluorescence,
        fluor_scale=fluor_scale,
        fluor_min=fluor_min,
        fluor_max=fluor_max,
        temp_at_min=temp_at_min,
        temp_at_max=temp_at_max,
        is_rising=temp_at_max > temp_at_min,
    )
