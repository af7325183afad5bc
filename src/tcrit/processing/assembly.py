import pandas as pd

from tcrit.models import METRIC_COLUMNS, TcritResults
from tcrit.processing.pipeline import WellResult
from tcrit.utils.validation import validate_label_columns

RESULT_COLUMNS = ["well", *METRIC_COLUMNS, "status"]


def get_results_table(results: dict[str, WellResult]) -> pd.DataFrame:
    """One row per well with Tmax, T50, Tcrit, Tcrit_se and status"""
    rows = [
        {
            "well": result.well_position,
            "Tmax": result.tmax,
            "T50": result.t50,
            "Tcrit": result.tcrit,
            "Tcrit_se": result.tcrit_se,
            "status": result.status,
        }
        for result in results.values()
    ]

    table = pd.DataFrame(rows, columns=RESULT_COLUMNS)
    table[METRIC_COLUMNS] = table[METRIC_COLUMNS].astype(float)

    return TcritResults.validate(table)


def assemble_results(
    results: dict[str, WellResult], labels: pd.DataFrame | None = None
) -> pd.DataFrame:
    """Build the final per-well table, left-joined with optional well labels.

    Wells without a label row keep their metrics with empty label fields. Label rows for
    wells that were not analyzed are ignored.

    Args:
        results: Per-well pipeline results, keyed by well id
        labels: Table with a ``well`` column and any number of label columns

    Returns:
        pd.DataFrame: Columns well, Tmax, T50, Tcrit, Tcrit_se, status, then label columns
    """
    table = get_results_table(results)
    if labels is None:
        return table

    validate_label_columns(labels.drop(columns="well"), RESULT_COLUMNS)

    return table.merge(labels, on="well", how="left", validate="one_to_one")
