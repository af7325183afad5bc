import numpy as np
import plotly.graph_objects as go

from tcrit.processing.pipeline import WellResult
from tcrit.utils.reformatting import convert_results_to_plate_format

METRIC_TITLES = {
    "tmax": "Tmax",
    "t50": "T50",
    "tcrit": "Tcrit",
    "tcrit_se": "Tcrit standard error",
}


def plot_plate_data(
    plate_data: np.ndarray,
    cols: list[str],
    rows: list[str],
    title: str,
    color_scale: str = "RdBu_r",
    colorbar_title: str = "°C",
) -> go.Figure:
    """Plate-layout heatmap with the value printed in each well. NaN wells stay blank."""
    cell_text = [[f"{val:.2f}" if not np.isnan(val) else "" for val in row] for row in plate_data]

    heatmap_fig = go.Figure(
        go.Heatmap(
            z=plate_data,
            x=cols,
            y=rows,
            colorscale=color_scale,
            text=cell_text,
            texttemplate="%{text}",
            textfont={"size": 10},
            colorbar=dict(title=dict(text=colorbar_title, side="right"), thickness=20, len=0.8),
            xgap=2,
            ygap=2,
            hoverongaps=False,
        )
    )

    grid = dict(showgrid=True, gridcolor="lightgrey", gridwidth=1, tickson="boundaries")
    heatmap_fig.update_layout(
        title={"text": title, "x": 0.5, "xanchor": "center"},
        height=400,
        yaxis_autorange="reversed",
        margin=dict(t=60, r=80, b=40, l=60),
        xaxis=dict(side="top", tickmode="linear", dtick=1, **grid),
        yaxis=grid,
        plot_bgcolor="white",
    )

    return heatmap_fig


def create_plate_heatmap(results: dict[str, WellResult], metric: str = "tcrit") -> go.Figure:
    """Heatmap of one per-well metric over the plate"""
    plate_data, cols, rows = convert_results_to_plate_format(results, metric=metric)

    return plot_plate_data(plate_data, cols=cols, rows=rows, title=METRIC_TITLES[metric])
