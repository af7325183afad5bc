from dataclasses import dataclass

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class Landmarks:
    """Temperatures at the peak and at half rise of a rescaled well.

    Attributes:
        tmax: Temperature where the scaled fluorescence reaches 1.
        t50: Temperature where the scaled fluorescence is closest to 0.5, searched only
            up to and including the Tmax point.
        tmax_index: Position of Tmax in the series.
        t50_index: Position of T50 in the series.
    """

    tmax: float
    t50: float
    tmax_index: int
    t50_index: int


def get_landmarks(
    temperature: np.ndarray | pd.Series, fluor_scale: np.ndarray | pd.Series
) -> Landmarks:
    """Get Tmax and T50 from a temperature-ordered scaled series.

    Both lookups are by index of the extremum, so ties go to the first point.
    """
    temperature = np.asarray(temperature, dtype=float)
    fluor_scale = np.asarray(fluor_scale, dtype=float)

    if fluor_scale.size == 0:
        raise ValueError("Cannot locate landmarks in an empty series")

    tmax_index = int(np.argmax(fluor_scale))
    rising = fluor_scale[: tmax_index + 1]
    t50_index = int(np.argmin(np.abs(rising - 0.5)))

    return Landmarks(
        tmax=float(temperature[tmax_index]),
        t50=float(temperature[t50_index]),
        tmax_index=tmax_index,
        t50_index=t50_index,
    )
