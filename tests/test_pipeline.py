import logging

import numpy as np
import pandas as pd
import pytest

from tcrit.config import TcritConfig
from tcrit.processing.pipeline import WellResult, analyze_well, analyze_wells, run_pipeline

# breakpoint of the synthetic ramp in conftest.py
TRUE_TCRIT = 45.0


@pytest.fixture
def sigmoid_well() -> tuple[np.ndarray, np.ndarray]:
    """One binned well rising between 40 and 50 °C."""
    temperature = np.arange(30.0, 61.0, 0.5)
    fluorescence = 100 + np.where(temperature > 42, (temperature - 42) ** 2, 0.0)
    fluorescence = np.minimum(fluorescence, 200)
    return temperature, fluorescence


class TestAnalyzeWell:
    def test_ok(self, sigmoid_well: tuple[np.ndarray, np.ndarray]) -> None:
        """Test that a rising well gets landmarks and a breakpoint."""
        result = analyze_well("A1", *sigmoid_well)

        assert isinstance(result, WellResult)
        assert result.status == "ok"
        assert result.tmax == 52.0
        assert result.t50 <= result.tmax
        assert result.t50 - 12 < result.tcrit < result.t50 + 1
        assert result.tcrit_se >= 0
        assert result.fit is not None
        assert result.message == ""

    def test_flat_well(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a flat well is degenerate, with a warning naming well and stage."""
        with caplog.at_level(logging.WARNING, logger="tcrit"):
            result = analyze_well("C4", np.arange(30.0, 50.0), np.full(20, 50.0))

        assert result.status == "degenerate_scale"
        assert np.isnan(result.tcrit)
        assert np.isnan(result.tmax)
        assert result.scaled is None
        assert "C4" in caplog.text
        assert "rescaling" in caplog.text

    def test_small_window(self, sigmoid_well: tuple[np.ndarray, np.ndarray]) -> None:
        """Test that a fit window with fewer than 4 points is a convergence failure."""
        config = TcritConfig(prebuffer=0.5, postbuffer=0.5)

        result = analyze_well("B1", *sigmoid_well, config)

        assert result.status == "convergence_failure"
        assert np.isnan(result.tcrit)
        assert np.isnan(result.tcrit_se)
        assert result.tmax == 52.0
        assert not np.isnan(result.t50)
        assert "points" in result.message


class TestAnalyzeWells:
    def test_plate_order(self) -> None:
        """Test that results come back in plate order, A2 before A10."""
        temperature = np.arange(30.0, 61.0, 0.5)
        fluorescence = 100 + np.clip(temperature - 42, 0, 10) * 10
        frames = [
            pd.DataFrame(
                {
                    "well_position": well,
                    "temperature_bin": np.arange(1, len(temperature) + 1),
                    "temperature": temperature,
                    "fluorescence": fluorescence,
                }
            )
            for well in ["A10", "B1", "A2"]
        ]

        results = analyze_wells(pd.concat(frames, ignore_index=True))

        assert list(results) == ["A2", "A10", "B1"]


class TestRunPipeline:
    def test_sample_ramp(self, sample_raw_data: pd.DataFrame) -> None:
        """Test the full pipeline on a ramp with a known breakpoint."""
        results = run_pipeline(sample_raw_data)

        assert list(results) == ["A1", "A2", "A3"]
        for well in ["A1", "A2"]:
            assert results[well].status == "ok"
            assert results[well].tcrit == pytest.approx(TRUE_TCRIT, abs=0.5)
            assert results[well].tmax == pytest.approx(52.0, abs=0.5)
            assert results[well].t50 == pytest.approx(48.25, abs=0.5)

    def test_flat_well_does_not_affect_others(self, sample_raw_data: pd.DataFrame) -> None:
        """Test that a degenerate well is isolated from the rest of the plate."""
        results = run_pipeline(sample_raw_data)
        only_good = run_pipeline(sample_raw_data.drop(columns="A3"))

        assert results["A3"].status == "degenerate_scale"
        assert results["A1"].tcrit == only_good["A1"].tcrit

    def test_outlier_spike_removed(self, sample_raw_data: pd.DataFrame) -> None:
        """Test that a fluorescence spike does not distort the scale."""
        spiked = sample_raw_data.copy()
        spiked.loc[100, "A1"] = 1e5

        results = run_pipeline(spiked)

        assert results["A1"].status == "ok"
        assert results["A1"].scaled.fluor_max < 300
        assert len(results["A1"].scaled.temperature) == 69
        assert results["A1"].tcrit == pytest.approx(TRUE_TCRIT, abs=0.5)

    def test_idempotent(self, sample_raw_data: pd.DataFrame) -> None:
        """Test that repeated runs give identical results."""
        first = run_pipeline(sample_raw_data)
        second = run_pipeline(sample_raw_data)

        for well in first:
            assert first[well].status == second[well].status
            assert first[well].tmax == second[well].tmax or np.isnan(first[well].tmax)
            assert first[well].t50 == second[well].t50 or np.isnan(first[well].t50)
            assert first[well].tcrit == second[well].tcrit or np.isnan(first[well].tcrit)

    def test_parallel_matches_serial(self, sample_raw_data: pd.DataFrame) -> None:
        """Test that distributing wells over processes does not change results."""
        serial = run_pipeline(sample_raw_data)
        parallel = run_pipeline(sample_raw_data, TcritConfig(n_jobs=2))

        assert list(parallel) == list(serial)
        assert parallel["A1"].tcrit == serial["A1"].tcrit
        assert parallel["A3"].status == "degenerate_scale"
