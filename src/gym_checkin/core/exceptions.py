class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class GymNotAccepting(ValidationError):
    """Raised when check-in is attempted at an unknown or inactive gym."""


class StoreError(DomainError):
    """Raised when the record store fails or returns malformed data."""


class StoreUnavailable(StoreError):
    """Raised when the record store cannot be reached (network, timeout)."""


class DuplicateOpenSession(StoreError):
    """Raised when inserting a second OPEN session for the same member and gym."""


class ClockSkew(DomainError):
    """Raised when a check-out instant precedes the check-in instant."""


class ConflictOnClose(DomainError):
    """Raised when a session is no longer OPEN at the time of the close write."""
