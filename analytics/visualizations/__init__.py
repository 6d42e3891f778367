"""Visualization generators."""

from analytics.visualizations.base import Visualization
from analytics.visualizations.charts import BarChart, Heatmap, LineChart, PieChart

__all__ = ["Visualization", "BarChart", "LineChart", "PieChart", "Heatmap"]
