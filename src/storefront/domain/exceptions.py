"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI and HTTP layers can catch them uniformly.  Each exception carries
an ``ErrorKind`` tag which the boundaries map to one response shape.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    VALIDATION = "Validation"
    NOT_FOUND = "NotFound"
    CONFLICT = "Conflict"
    AUTHORIZATION = "Authorization"
    INTERNAL = "Internal"


class DomainException(Exception):
    """Base class for all domain errors."""

    kind: ErrorKind = ErrorKind.INTERNAL
    retryable: bool = False

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    kind = ErrorKind.VALIDATION


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(DomainException):
    """The request conflicts with the current state of the store."""

    kind = ErrorKind.CONFLICT


class InsufficientStockError(ConflictError):
    """A product does not have enough units left for the requested quantity."""

    def __init__(self, product_id: str, title: str, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for {title} (need {requested}, have {available} available)",
            product_id=product_id,
            requested=requested,
            available=available,
        )
        self.product_id = product_id
        self.available = available


class TransactionTimeoutError(ConflictError):
    """The store could not start a transaction in time; safe to retry."""

    retryable = True


class AuthorizationError(DomainException):
    """The acting identity may not perform the requested operation."""

    kind = ErrorKind.AUTHORIZATION
