import numpy as np

from tcrit.processing.pipeline import WellResult
from tcrit.utils.utils import get_column_labels, get_row_labels, parse_well_id

PLATE_METRICS = ("tmax", "t50", "tcrit", "tcrit_se")


def convert_results_to_plate_format(
    results: dict[str, WellResult],
    metric: str = "tcrit",
    n_rows: int = 8,
    n_cols: int | None = None,
) -> tuple[np.ndarray, list[str], list[str]]:
    """Arrange one per-well metric in plate layout.

    Wells without a result, or whose metric is missing, are NaN. ``n_cols`` defaults to the
    highest column number among the results.
    """
    if metric not in PLATE_METRICS:
        raise ValueError(f"Unknown metric {metric!r}, expected one of {PLATE_METRICS}")

    positions = {well: parse_well_id(well) for well in results}
    if n_cols is None:
        n_cols = max((col for _, col in positions.values()), default=0) + 1

    rows = get_row_labels(n_rows)
    cols = get_column_labels(n_cols, as_str=True)

    plate_data = np.full((len(rows), len(cols)), np.nan)

    for well, result in results.items():
        row_idx, col_idx = positions[well]
        if row_idx >= len(rows) or col_idx >= len(cols):
            raise IndexError(f"Well {well} does not fit a {len(rows)}x{len(cols)} plate")
        plate_data[row_idx, col_idx] = getattr(result, metric)

    return plate_data, [str(c) for c in cols], rows
