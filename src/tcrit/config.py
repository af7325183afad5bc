from dataclasses import dataclass

BIN_REMAINDER_POLICIES = ("error", "truncate")


@dataclass(frozen=True)
class TcritConfig:
    """Parameters for a single Tcrit analysis run.

    Defaults follow the Arnold et al. 2021 protocol for FluorCam ramps.

    Attributes:
        bin_size: Number of consecutive raw readings averaged into one temperature bin.
        bin_remainder: What to do when the reading count is not a multiple of bin_size.
            "error" aborts the run, "truncate" drops the trailing partial bin.
        outlier_iqr_factor: A binned value is an outlier when it exceeds
            median + outlier_iqr_factor * IQR of its well.
        prebuffer: Degrees Celsius below T50 included in the breakpoint fit window.
        postbuffer: Degrees Celsius above T50 included in the breakpoint fit window.
        max_iterations: Iteration cap for the segmented regression.
        tolerance: Relative deviance change at which the segmented regression stops.
        min_window_points: Smallest fit window that is still fitted.
        n_jobs: Number of worker processes for the per-well map. 1 runs inline.
    """

    bin_size: int = 5
    bin_remainder: str = "error"
    outlier_iqr_factor: float = 3.0
    prebuffer: float = 12.0
    postbuffer: float = 1.0
    max_iterations: int = 30
    tolerance: float = 1e-5
    min_window_points: int = 4
    n_jobs: int = 1

    def __post_init__(self) -> None:
        if self.bin_size < 1:
            raise ValueError(f"bin_size must be at least 1, got {self.bin_size}")
        if self.bin_remainder not in BIN_REMAINDER_POLICIES:
            raise ValueError(
                f"bin_remainder must be one of {BIN_REMAINDER_POLICIES}, got {self.bin_remainder!r}"
            )
        if self.outlier_iqr_factor < 0:
            raise ValueError("outlier_iqr_factor must be non-negative")
        if self.prebuffer <= 0 or self.postbuffer <= 0:
            raise ValueError("prebuffer and postbuffer must be positive")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        if self.tolerance <= 0:
            raise ValueError("tolerance must be positive")
        if self.min_window_points < 4:
            raise ValueError("min_window_points must be at least 4")
        if self.n_jobs < 1:
            raise ValueError("n_jobs must be at least 1")
