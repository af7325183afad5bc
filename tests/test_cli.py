from pathlib import Path

import pandas as pd
import pytest

from tcrit.cli import build_parser, main
from tcrit.utils.workspace import PROCESSED_DIR, RAW_DIR, ensure_workspace


class TestBuildParser:
    def test_defaults(self) -> None:
        """Test that analysis options default to the standard configuration."""
        args = build_parser().parse_args(["analyze", "run1.TXT"])

        assert args.raw_file == Path("run1.TXT")
        assert args.bin_size == 5
        assert args.bin_remainder == "error"
        assert args.prebuffer == 12.0
        assert args.postbuffer == 1.0
        assert not args.no_plots

    def test_command_required(self) -> None:
        """Test that a subcommand must be given."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


class TestMain:
    def test_analyze(self, tmp_path: Path, fluorcam_file: Path, label_file: Path) -> None:
        """Test a successful analyze run with a log file."""
        out = tmp_path / "out"
        log_file = tmp_path / "tcrit.log"

        code = main(
            [
                "analyze",
                str(fluorcam_file),
                "--labels",
                str(label_file),
                "--output-dir",
                str(out),
                "--no-plots",
                "--log-file",
                str(log_file),
            ]
        )

        assert code == 0
        assert pd.read_csv(out / "run1.csv")["site"].tolist()[:2] == ["North", "South"]
        assert "Tcrit found for 2 of 3 wells" in log_file.read_text()

    def test_analyze_keeps_label_file(
        self, tmp_path: Path, fluorcam_file: Path, label_file: Path
    ) -> None:
        """Test that results written next to the inputs leave the label file intact."""
        labels_before = label_file.read_text()

        code = main(["analyze", str(fluorcam_file), "--labels", str(label_file), "--no-plots"])

        assert code == 0
        assert label_file.read_text() == labels_before
        written = pd.read_csv(tmp_path / "run1_tcrit.csv")
        assert written["site"].tolist()[:2] == ["North", "South"]

    def test_missing_labels(self, tmp_path: Path, fluorcam_file: Path) -> None:
        """Test that an explicitly named but missing label file fails the run."""
        code = main(
            ["analyze", str(fluorcam_file), "--labels", str(tmp_path / "none.csv"), "--no-plots"]
        )

        assert code == 1

    def test_uneven_bins(
        self, tmp_path: Path, sample_raw_data: pd.DataFrame, fluorcam_writer
    ) -> None:
        """Test that leftover readings fail by default and can be truncated."""
        raw_file = fluorcam_writer(tmp_path / "short.TXT", sample_raw_data.iloc[:348])
        out = str(tmp_path / "out")

        assert main(["analyze", str(raw_file), "--output-dir", out, "--no-plots"]) == 1
        assert (
            main(
                [
                    "analyze",
                    str(raw_file),
                    "--output-dir",
                    out,
                    "--no-plots",
                    "--bin-remainder",
                    "truncate",
                ]
            )
            == 0
        )

    def test_invalid_option(self, fluorcam_file: Path) -> None:
        """Test that an invalid configuration value is reported, not raised."""
        assert main(["analyze", str(fluorcam_file), "--bin-size", "0", "--no-plots"]) == 1

    def test_process_new(
        self, tmp_path: Path, sample_raw_data: pd.DataFrame, fluorcam_writer
    ) -> None:
        """Test the workspace command."""
        ensure_workspace(tmp_path)
        fluorcam_writer(tmp_path / RAW_DIR / "run1.TXT", sample_raw_data)

        assert main(["process-new", "--root", str(tmp_path), "--no-plots"]) == 0
        assert (tmp_path / PROCESSED_DIR / "run1.csv").is_file()
