# core/exceptions.py
"""
Domain errors raised by the trip and fuel services.

Services raise these unmodified; ``core.api.domain_exception_handler`` turns
them into HTTP responses at the API boundary.
"""


class DomainError(Exception):
    code = "domain_error"

    def __init__(self, message: str, **detail):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, **self.detail}


class ValidationError(DomainError):
    """Malformed input: bad enum, GPS out of range, missing field."""
    code = "validation_error"


class InvalidTokenError(ValidationError):
    code = "invalid_token"


class AccessError(DomainError):
    """Actor is not entitled to act on this entity."""
    code = "access_denied"


class NotFoundError(DomainError):
    code = "not_found"


class ConflictError(DomainError):
    """Precondition on current state violated."""
    code = "conflict"


class SequenceError(ConflictError):
    code = "sequence_error"

    def __init__(self, expected: int, received: int, completed: int | None = None):
        super().__init__(
            f"Invalid milestone sequence. Expected milestone {expected}, got {received}",
            expected=expected,
            received=received,
            completed=expected - 1 if completed is None else completed,
        )
        self.expected = expected
        self.received = received


class InsufficientBalanceError(DomainError):
    code = "insufficient_balance"

    def __init__(self, balance, required):
        super().__init__("Insufficient card balance", balance=str(balance), required=str(required))
        self.balance = balance
        self.required = required


class ExpiredError(DomainError):
    code = "expired"
