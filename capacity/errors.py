"""Exceptions raised by the capacity planning core."""


class CapacityError(Exception):
    """Base class for capacity planning errors."""

    status_code = 500


class ValidationError(CapacityError, ValueError):
    """Input rejected before any computation or write happens."""

    status_code = 400


class NotFoundError(CapacityError, LookupError):
    """A referenced iteration, week, member or project does not exist."""

    status_code = 404

    def __init__(self, entity: str, identifier) -> None:
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} not found")
