from pathlib import Path

import numpy as np
import pandas as pd
import pytest

# Synthetic ramp: shallow baseline, breakpoint at 45 °C, steep rise to a peak at 52 °C,
# decay afterwards. 350 readings = 70 bins of 5.
TRUE_TCRIT = 45.0
N_READINGS = 350


def fluorescence_curve(temperature: np.ndarray) -> np.ndarray:
    baseline = 100 + 0.5 * (temperature - 25)
    rise = 110 + 20 * (temperature - 45)
    decay = 250 - 10 * (temperature - 52)
    return np.where(temperature < 45, baseline, np.where(temperature < 52, rise, decay))


@pytest.fixture
def ramp_temperatures() -> np.ndarray:
    """Reading temperatures of one FluorCam ramp."""
    return np.linspace(25, 60, N_READINGS)


@pytest.fixture
def sample_raw_data(ramp_temperatures: np.ndarray) -> pd.DataFrame:
    """Wide raw readings: A1 and A2 with a breakpoint at 45 °C, A3 flat."""
    curve = fluorescence_curve(ramp_temperatures)
    return pd.DataFrame(
        {
            "time": np.arange(N_READINGS, dtype=float) * 2.0,
            "temperature": ramp_temperatures,
            "A1": curve,
            "A2": 1.5 * curve + 20,
            "A3": np.full(N_READINGS, 100.0),
        }
    )


@pytest.fixture
def sample_well_series() -> pd.DataFrame:
    """Binned long-format series for two wells, A1 with one spike."""
    temperatures = np.arange(30.0, 40.0)
    return pd.DataFrame(
        {
            "well_position": ["A1"] * 10 + ["A2"] * 10,
            "temperature_bin": list(range(1, 11)) * 2,
            "temperature": np.concatenate([temperatures, temperatures]),
            "fluorescence": [1, 2, 3, 4, 5, 6, 7, 8, 9, 100] + [10] * 10,
        }
    ).astype({"fluorescence": float})


def write_fluorcam_file(path: Path, raw: pd.DataFrame, header: list[str] | None = None) -> Path:
    """Write ``raw`` as a FluorCam text export with a two-line preamble."""
    if header is None:
        header = ["Time", "Temp", *raw.columns[2:]]
    lines = ["FluorCam 7 export", "Protocol: Tcrit ramp", "\t".join(header)]
    for row in raw.itertuples(index=False):
        lines.append("\t".join(repr(float(v)) for v in row))
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def fluorcam_file(tmp_path: Path, sample_raw_data: pd.DataFrame) -> Path:
    """FluorCam text export of ``sample_raw_data``."""
    return write_fluorcam_file(tmp_path / "run1.TXT", sample_raw_data)


@pytest.fixture
def label_file(tmp_path: Path) -> Path:
    """Label CSV covering A1 and A2 but not A3."""
    path = tmp_path / "run1.csv"
    path.write_text("well,site,species\nA1,North,Acacia aneura\nA2,South,Banksia serrata\n")
    return path


@pytest.fixture
def fluorcam_writer():
    """Factory writing arbitrary frames as FluorCam exports."""
    return write_fluorcam_file
