from tcrit.visualization.heatmap import create_plate_heatmap, plot_plate_data
from tcrit.visualization.tcrit_curves import create_tcrit_plot, save_well_plots

__all__ = ["create_plate_heatmap", "create_tcrit_plot", "plot_plate_data", "save_well_plots"]
