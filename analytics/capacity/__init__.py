"""Capacity planning metrics."""

from analytics.capacity.iteration_capacity import IterationCapacityMetric
from analytics.capacity.project_trend import ProjectCapacityTrendMetric
from analytics.capacity.weekly_availability import WeeklyAvailabilityMetric

__all__ = [
    "IterationCapacityMetric",
    "ProjectCapacityTrendMetric",
    "WeeklyAvailabilityMetric",
]
