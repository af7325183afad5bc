import numpy as np
import pytest

from tcrit.processing.pipeline import WellResult
from tcrit.utils.reformatting import convert_results_to_plate_format


@pytest.fixture
def well_results() -> dict[str, WellResult]:
    return {
        "A1": WellResult("A1", "ok", tmax=52.0, t50=48.0, tcrit=45.0, tcrit_se=0.1),
        "B3": WellResult("B3", "ok", tmax=51.0, t50=47.5, tcrit=44.2, tcrit_se=0.2),
        "C2": WellResult("C2", "degenerate_scale"),
    }


class TestConvertResultsToPlateFormat:
    def test_plate_layout(self, well_results: dict[str, WellResult]) -> None:
        """Test that metrics land at their well coordinates."""
        plate_data, cols, rows = convert_results_to_plate_format(well_results)

        assert plate_data.shape == (8, 3)
        assert cols == ["1", "2", "3"]
        assert rows == list("ABCDEFGH")
        assert plate_data[0, 0] == 45.0
        assert plate_data[1, 2] == 44.2
        assert np.isnan(plate_data[2, 1])
        assert np.isnan(plate_data[7, 0])

    def test_other_metric(self, well_results: dict[str, WellResult]) -> None:
        """Test selecting a different metric and a fixed plate width."""
        plate_data, cols, _ = convert_results_to_plate_format(well_results, "tmax", n_cols=12)

        assert plate_data.shape == (8, 12)
        assert len(cols) == 12
        assert plate_data[1, 2] == 51.0

    def test_unknown_metric(self, well_results: dict[str, WellResult]) -> None:
        """Test that only per-well temperature metrics can be plotted."""
        with pytest.raises(ValueError, match="Unknown metric"):
            convert_results_to_plate_format(well_results, "status")

    def test_well_outside_plate(self, well_results: dict[str, WellResult]) -> None:
        """Test that a well beyond the requested plate size raises."""
        with pytest.raises(IndexError):
            convert_results_to_plate_format(well_results, n_rows=2)
