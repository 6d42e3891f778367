"""Persistence services wrapping the capacity core in transactions."""

from data.services.availability_service import AvailabilityService
from data.services.base import get_or_raise, transaction
from data.services.capacity_service import CapacityService
from data.services.iteration_service import IterationService

__all__ = [
    "AvailabilityService",
    "CapacityService",
    "IterationService",
    "get_or_raise",
    "transaction",
]
