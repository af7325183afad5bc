import logging
from pathlib import Path

import numpy as np
import plotly.graph_objects as go

from tcrit.processing.pipeline import WellResult

logger = logging.getLogger(__name__)

# 4 x 3 inch figure at 100 px per inch, exported at 3x for print quality
PLOT_WIDTH = 400
PLOT_HEIGHT = 300
EXPORT_SCALE = 3

INDICATOR_COLORS = {"Tcrit": "red", "T50": "orange", "Tmax": "pink"}


def create_tcrit_plot(result: WellResult) -> go.Figure:
    """Observed and fitted scaled fluorescence of one well, with Tcrit/T50/Tmax markers.

    The fitted broken line only covers the breakpoint fit window and is drawn only when
    the fit succeeded.

    Args:
        result: Pipeline result for the well

    Returns:
        plotly.graph_objects.Figure

    Raises:
        ValueError: If the well could not be rescaled, there is nothing to plot
    """
    if result.scaled is None:
        raise ValueError(f"Well {result.well_position} has no scaled fluorescence to plot")

    fig = go.Figure()

    fig.add_trace(
        go.Scatter(
            x=result.scaled.temperature,
            y=result.scaled.fluor_scale,
            name="observed",
            mode="lines",
            line=dict(color="black"),
        )
    )

    if result.fit is not None:
        fig.add_trace(
            go.Scatter(
                x=result.fit.temperature,
                y=result.fit.fitted,
                name="fitted",
                mode="lines",
                line=dict(color="blue"),
            )
        )

    indicators = {"Tcrit": result.tcrit, "T50": result.t50, "Tmax": result.tmax}
    for label, temperature in indicators.items():
        if np.isnan(temperature):
            continue
        fig = _add_temperature_indicator(fig, label, temperature)

    fig.update_layout(
        title=dict(text=f"Well {result.well_position}", x=0.5, xanchor="center"),
        width=PLOT_WIDTH,
        height=PLOT_HEIGHT,
        margin=dict(t=40, r=20, b=40, l=50),
        showlegend=True,
        plot_bgcolor="white",
        font=dict(size=10),
        xaxis=dict(title="Temperature (°C)", showline=True, linecolor="black"),
        yaxis=dict(
            title="Scaled fluorescence",
            tickmode="linear",
            tick0=0,
            dtick=0.25,
            showline=True,
            linecolor="black",
        ),
    )

    return fig


def _add_temperature_indicator(fig: go.Figure, label: str, temperature: float) -> go.Figure:
    fig.add_vline(
        x=temperature,
        line_dash="dash",
        line_color=INDICATOR_COLORS[label],
        annotation_text=f"{label} = {temperature:.2f}°C",
        annotation_font_size=8,
    )
    return fig


def save_well_plots(results: dict[str, WellResult], plot_dir: Path) -> list[Path]:
    """Write one ``<well>.png`` per plottable well into ``plot_dir``.

    Wells whose trace could not be rescaled are skipped.
    """
    plot_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for well, result in results.items():
        if result.scaled is None:
            logger.info("Well %s: no plot, trace could not be rescaled", well)
            continue
        path = plot_dir / f"{well}.png"
        create_tcrit_plot(result).write_image(path, scale=EXPORT_SCALE)
        written.append(path)

    logger.info("Wrote %d well plots to %s", len(written), plot_dir)
    return written
