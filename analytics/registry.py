"""Auto-discovery registry for analytics metrics."""

from typing import Type

from analytics.base import AnalyticsMetric


class AnalyticsRegistry:
    """Registry for analytics metric implementations."""

    _metrics: dict[str, Type[AnalyticsMetric]] = {}

    @classmethod
    def register(cls, metric_class: Type[AnalyticsMetric]) -> Type[AnalyticsMetric]:
        """Register an analytics metric class.

        Use as a decorator:
            @AnalyticsRegistry.register
            class MyMetric(AnalyticsMetric):
                ...

        Returns:
            The registered class (for decorator use).
        """
        metric_id = metric_class.metric_id.fget(None)  # type: ignore
        if metric_id is None:
            raise ValueError(f"{metric_class.__name__} must define metric_id property")
        cls._metrics[metric_id] = metric_class
        return metric_class

    @classmethod
    def get(cls, metric_id: str) -> Type[AnalyticsMetric] | None:
        """Get a registered metric class by ID, or None."""
        return cls._metrics.get(metric_id)

    @classmethod
    def get_by_category(cls, category: str) -> list[Type[AnalyticsMetric]]:
        """Get all metrics in a category ('iteration' or 'project')."""
        return [
            metric_class
            for metric_class in cls._metrics.values()
            if metric_class.category.fget(None) == category  # type: ignore
        ]

    @classmethod
    def get_all(cls) -> dict[str, Type[AnalyticsMetric]]:
        return cls._metrics.copy()

    @classmethod
    def describe(cls, category: str | None = None) -> list[dict]:
        """Metadata of registered metrics, sorted by ID.

        Args:
            category: Optional category filter.
        """
        classes = (
            cls.get_by_category(category) if category else cls._metrics.values()
        )
        described = []
        for metric_class in classes:
            metric = metric_class()
            described.append(
                {
                    "metric_id": metric.metric_id,
                    "title": metric.title,
                    "description": metric.description,
                    "category": metric.category,
                    "filters": metric.get_filter_options(),
                }
            )
        return sorted(described, key=lambda m: m["metric_id"])

    @classmethod
    def discover(cls) -> None:
        """Import all metric modules to trigger registration.

        Call this during application startup to ensure all metrics
        are registered.
        """
        # Import metric modules to trigger @register decorators
        import analytics.capacity  # noqa: F401
