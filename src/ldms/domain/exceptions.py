"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the request layer can catch them uniformly.  Each class carries the HTTP
status an HTTP front end should answer with.
"""


class DomainException(Exception):
    """Base class for all domain errors."""

    http_status = 500


class ValidationError(DomainException):
    """A business rule or invariant was violated by the caller's input."""

    http_status = 400


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    http_status = 404


class DealExpiredError(DomainException):
    """The deal's window has closed; nothing was mutated."""

    http_status = 410


class InsufficientInventoryError(DomainException):
    """The conditional decrement was refused; nothing was mutated."""

    http_status = 409

    def __init__(self, deal_id: int, requested: int, remaining: int) -> None:
        super().__init__(
            f"Insufficient inventory for deal #{deal_id} "
            f"(need {requested}, have {remaining} available)"
        )
        self.deal_id = deal_id
        self.requested = requested
        self.remaining = remaining


class DuplicateRequestError(DomainException):
    """An order with the same idempotency key already exists."""

    http_status = 409

    def __init__(self, idempotency_key: str) -> None:
        super().__init__(f"Idempotency key '{idempotency_key}' already used")
        self.idempotency_key = idempotency_key


class StoreUnavailableError(DomainException):
    """The backing store timed out or dropped the connection.  Retryable."""

    http_status = 503


class InternalInconsistencyError(DomainException):
    """Units were decremented but could neither be sold nor restored."""

    http_status = 500
