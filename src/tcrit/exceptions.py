class TcritError(Exception):
    """Base class for all errors raised by tcrit."""


class MalformedInputError(TcritError, ValueError):
    """Input file or table cannot be analyzed. Fatal for the run."""


class WellAnalysisError(TcritError, ValueError):
    """A single well could not be analyzed. Recoverable, the run continues."""

    stage = "analysis"


class DegenerateScaleError(WellAnalysisError):
    """Fluorescence trace is flat or inverted and cannot be rescaled."""

    stage = "rescaling"


class ConvergenceError(WellAnalysisError):
    """Segmented regression did not produce a breakpoint."""

    stage = "breakpoint fit"
