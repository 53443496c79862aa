"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Cart operations never raise; everything below comes from checkout, the
order lifecycle or the persistence gateway.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or precondition was violated (no I/O attempted)."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class IllegalTransitionError(DomainException):
    """The requested status change is not in the lifecycle table."""


class GatewayError(DomainException):
    """A persistence gateway read or write failed.

    ``retryable`` tells the caller whether repeating the same request is
    safe.  Status updates are idempotent; order creation is not.
    ``compensated`` is set when a partially written order was rolled back.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        retryable: bool = False,
        compensated: bool = False,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.retryable = retryable
        self.compensated = compensated


class AuthorizationError(GatewayError):
    """The requester is not allowed to touch this order."""

    def __init__(self, message: str, *, operation: str) -> None:
        super().__init__(message, operation=operation, retryable=False)


class ConsistencyError(DomainException):
    """Compensation failed and an order header was left without lines.

    This is the only fatal-class error: the data store needs manual
    reconciliation for ``order_id``.
    """

    def __init__(self, message: str, *, order_id: str) -> None:
        super().__init__(message)
        self.order_id = order_id
