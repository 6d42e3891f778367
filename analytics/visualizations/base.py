"""Abstract base class for visualizations."""

from abc import ABC, abstractmethod
from typing import Any


class Visualization(ABC):
    """Abstract base class for chart types.

    Renders data to Plotly JSON, or HTML embedding that JSON.
    """

    @property
    @abstractmethod
    def viz_type(self) -> str:
        """Return the visualization type identifier."""
        pass

    @abstractmethod
    def render_json(self, data: Any, **options) -> str:
        """Render data to Plotly JSON.

        Args:
            data: Input data (DataFrame, dict, etc.)
            **options: Visualization-specific options.

        Returns:
            JSON string for Plotly.
        """
        pass

    def render_html(self, data: Any, **options) -> str:
        """Render data to an embeddable div plus Plotly.newPlot call."""
        chart_json = self.render_json(data, **options)
        div_id = options.get("div_id", "chart")
        return f"""
        <div id="{div_id}"></div>
        <script>
            var fig = {chart_json};
            Plotly.newPlot('{div_id}', fig.data, fig.layout);
        </script>
        """
