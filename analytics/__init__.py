"""Analytics layer: capacity metrics rendered with pandas and Plotly."""

from analytics.base import AnalyticsMetric, AnalyticsResult
from analytics.registry import AnalyticsRegistry

__all__ = ["AnalyticsMetric", "AnalyticsResult", "AnalyticsRegistry"]
