import re
from typing import Iterable

from tcrit.models import WELL_ID_REGEX

ROW_LABELS = list("ABCDEFGH")


def get_row_labels(n_rows: int = 8) -> list[str]:
    if not 1 <= n_rows <= len(ROW_LABELS):
        raise ValueError(f"Unsupported number of rows: {n_rows}")

    return ROW_LABELS[:n_rows]


def get_column_labels(n_cols: int, as_str: bool = True) -> list[str | int]:
    if not 1 <= n_cols <= 99:
        raise ValueError(f"Unsupported number of columns: {n_cols}")

    if as_str:
        return [str(i) for i in range(1, n_cols + 1)]
    else:
        return list(range(1, n_cols + 1))


def parse_well_id(well: str) -> tuple[int, int]:
    """Split a well id into zero-based (row, column) indices."""
    if not re.match(WELL_ID_REGEX, well):
        raise ValueError(f"Invalid well id: {well!r}")

    return ROW_LABELS.index(well[0]), int(well[1:]) - 1


def sort_well_ids(wells: Iterable[str]) -> list[str]:
    """Sort well ids row by row, with numeric column order (A2 before A10)."""
    return sorted((str(w) for w in wells), key=parse_well_id)
