"""Chart visualization implementations."""

import json
from typing import Any

import plotly.express as px
import plotly.graph_objects as go
from plotly.utils import PlotlyJSONEncoder

from analytics.visualizations.base import Visualization


class BarChart(Visualization):
    """Bar chart visualization."""

    @property
    def viz_type(self) -> str:
        return "bar"

    def render_json(self, data: Any, **options) -> str:
        """Render bar chart to Plotly JSON.

        Args:
            data: Dict with 'x' and 'y' keys, or DataFrame.
            **options: title, x_label, y_label, orientation ('v' or 'h'),
                x_col, y_col and color_col for DataFrames.
        """
        if hasattr(data, "to_dict"):
            fig = px.bar(
                data,
                x=options.get("x_col", data.columns[0]),
                y=options.get("y_col", data.columns[1]),
                color=options.get("color_col"),
                title=options.get("title", ""),
                orientation=options.get("orientation", "v"),
            )
        else:
            fig = go.Figure(
                data=[
                    go.Bar(
                        x=data.get("x", []),
                        y=data.get("y", []),
                        orientation=options.get("orientation", "v"),
                    )
                ]
            )
            fig.update_layout(title=options.get("title", ""))

        fig.update_layout(
            xaxis_title=options.get("x_label", ""),
            yaxis_title=options.get("y_label", ""),
        )

        return json.dumps(fig, cls=PlotlyJSONEncoder)


class LineChart(Visualization):
    """Line chart visualization."""

    @property
    def viz_type(self) -> str:
        return "line"

    def render_json(self, data: Any, **options) -> str:
        """Render line chart to Plotly JSON.

        Args:
            data: Dict with 'x' and 'y' keys (or list of y series with
                'names'), or DataFrame.
            **options: title, x_label, y_label, x_col, y_cols, markers.
        """
        markers = options.get("markers", True)
        if hasattr(data, "to_dict"):
            x_col = options.get("x_col", data.columns[0])
            y_cols = options.get("y_cols", [data.columns[1]])
            fig = px.line(
                data, x=x_col, y=y_cols, title=options.get("title", ""), markers=markers
            )
        else:
            mode = "lines+markers" if markers else "lines"
            fig = go.Figure()
            x = data.get("x", [])
            y_series = data.get("y", [])
            if y_series and isinstance(y_series[0], (list, tuple)):
                names = data.get("names", [])
                for i, y in enumerate(y_series):
                    name = names[i] if i < len(names) else f"Series {i + 1}"
                    fig.add_trace(go.Scatter(x=x, y=y, mode=mode, name=name))
            else:
                fig.add_trace(go.Scatter(x=x, y=y_series, mode=mode))
            fig.update_layout(title=options.get("title", ""))

        fig.update_layout(
            xaxis_title=options.get("x_label", ""),
            yaxis_title=options.get("y_label", ""),
        )

        return json.dumps(fig, cls=PlotlyJSONEncoder)


class PieChart(Visualization):
    """Pie chart visualization."""

    @property
    def viz_type(self) -> str:
        return "pie"

    def render_json(self, data: Any, **options) -> str:
        """Render pie chart to Plotly JSON.

        Args:
            data: Dict with 'labels' and 'values' keys.
            **options: title, hole (0-1 for a donut).
        """
        fig = go.Figure(
            data=[
                go.Pie(
                    labels=data.get("labels", []),
                    values=data.get("values", []),
                    hole=options.get("hole", 0),
                )
            ]
        )
        fig.update_layout(title=options.get("title", ""))
        return json.dumps(fig, cls=PlotlyJSONEncoder)


class Heatmap(Visualization):
    """Heatmap of a 2-D matrix, e.g. member x week availability."""

    @property
    def viz_type(self) -> str:
        return "heatmap"

    def render_json(self, data: Any, **options) -> str:
        """Render heatmap to Plotly JSON.

        Args:
            data: Pivoted DataFrame (index -> rows, columns -> x axis), or dict
                with 'z', 'x' and 'y' keys.
            **options: title, x_label, y_label, zmin, zmax, colorscale.
        """
        if hasattr(data, "to_dict"):
            z = data.values.tolist()
            x = [str(c) for c in data.columns]
            y = [str(i) for i in data.index]
        else:
            z = data.get("z", [])
            x = data.get("x", [])
            y = data.get("y", [])

        fig = go.Figure(
            data=[
                go.Heatmap(
                    z=z,
                    x=x,
                    y=y,
                    zmin=options.get("zmin"),
                    zmax=options.get("zmax"),
                    colorscale=options.get("colorscale", "RdYlGn"),
                )
            ]
        )
        fig.update_layout(
            title=options.get("title", ""),
            xaxis_title=options.get("x_label", ""),
            yaxis_title=options.get("y_label", ""),
        )
        return json.dumps(fig, cls=PlotlyJSONEncoder)
