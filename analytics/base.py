"""Abstract base class for analytics metrics."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal


@dataclass
class AnalyticsResult:
    """Result of computing an analytics metric."""

    metric_id: str
    title: str
    computed_at: datetime = field(default_factory=datetime.utcnow)
    data: Any = None  # Raw data (DataFrame, dict, list, etc.)
    chart_json: str | None = None  # Primary Plotly JSON
    charts: dict = field(default_factory=dict)  # Additional Plotly JSON by name
    table_html: str | None = None  # HTML table representation
    summary: dict = field(default_factory=dict)  # Key stats for display
    error: str | None = None


class AnalyticsMetric(ABC):
    """Abstract base class for analytics metrics.

    Implement this class to add new metrics. Use the
    @AnalyticsRegistry.register decorator for auto-discovery.

    Example:
        @AnalyticsRegistry.register
        class IterationCapacity(AnalyticsMetric):
            metric_id = "iteration_capacity"
            title = "Iteration Capacity"
            description = "Effective capacity per member"
            category = "iteration"

            def compute(self, **kwargs) -> AnalyticsResult:
                # ... compute the metric
                return AnalyticsResult(...)
    """

    @property
    @abstractmethod
    def metric_id(self) -> str:
        """Unique identifier for this metric."""
        pass

    @property
    @abstractmethod
    def title(self) -> str:
        """Human-readable title for display."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Description of what this metric shows."""
        pass

    @property
    @abstractmethod
    def category(self) -> Literal["iteration", "project"]:
        """Category this metric belongs to.

        - 'iteration': Capacity and availability within one iteration
        - 'project': Capacity across the iterations of a project
        """
        pass

    @abstractmethod
    def compute(self, **kwargs) -> AnalyticsResult:
        """Compute the metric.

        Args:
            **kwargs: Metric-specific parameters (iteration, project, filters)

        Returns:
            AnalyticsResult with computed data and visualizations.
        """
        pass

    def get_filter_options(self) -> dict:
        """Return available filter options for this metric.

        Returns:
            Dictionary of filter definitions:
            {
                'iteration_id': {'type': 'select', 'label': 'Iteration'},
            }
        """
        return {}


def int_filter(filters: dict, name: str, required: bool = True) -> int | None:
    """Read an integer filter; query-string values arrive as text."""
    value = filters.get(name)
    if value is None or value == "":
        if required:
            raise ValueError(f"{name} is required")
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer") from None
