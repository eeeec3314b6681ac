"""Lookup failures that must reach the caller so a booking can be refused."""


class NotFoundError(LookupError):
    """Raised when a zone or service referenced by a request does not exist."""

    entity = "Record"

    def __init__(self, entity_id: int) -> None:
        self.entity_id = entity_id
        super().__init__(f"{self.entity} with ID {entity_id} not found")


class ZoneNotFoundError(NotFoundError):
    entity = "Zone"


class ServiceNotFoundError(NotFoundError):
    entity = "Service"
