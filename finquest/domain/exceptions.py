"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidArgumentError(DomainException):
    """Numeric input is malformed (non-positive term, score out of range, ...)"""

    pass


class NotFoundError(DomainException):
    """Referenced lesson or user profile does not exist"""

    pass


class UnauthenticatedError(NotFoundError):
    """Mutating call made without an authenticated user"""

    pass


class ConflictError(DomainException):
    """Optimistic write lost a race against a concurrent writer"""

    pass


class UnavailableError(DomainException):
    """Persistence layer unreachable or ledger retries exhausted"""

    pass
