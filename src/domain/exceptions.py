"""Base exception classes for the Line Sorter domain layer."""


class SorterError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class.
    This enables consistent error handling across the application
    and lets the API layer tell "your request was invalid" apart from
    "the system could not complete a valid request".

    Category subclasses live in src.domain.errors:
    - ValidationError
    - PermissionDeniedError
    - NotFoundError
    - NoLinesAvailableError
    - ConflictError
    - CooldownActiveError
    - StorageUnavailableError
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
