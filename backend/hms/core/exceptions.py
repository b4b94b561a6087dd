"""Domain errors raised by the service layer and mapped to HTTP responses in hms.core.handlers."""
from typing import Any, Optional


class HMSError(Exception):
    """Base class for every error the services raise on purpose."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateFieldError(HMSError):
    """A write would duplicate a value that has to be unique."""

    def __init__(self, entity: str, field: str, value: Any):
        self.entity = entity
        self.field = field
        self.value = value
        super().__init__(f"{entity} with {field} {value} already exists")


class InvalidRequestError(HMSError):
    """The request is well-formed but cannot be applied (bad sort field, inverted time range...)."""


class EntityNotFoundError(HMSError):
    """A referenced entity is missing. Plain lookups return None instead of raising this."""

    status_code = 404

    def __init__(self, entity: str, entity_id: Optional[int]):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} with ID {entity_id} not found")
