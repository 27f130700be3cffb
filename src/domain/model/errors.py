"""Domain-level exceptions.

Stores and services raise these errors to express business rule violations.
The entry manager converts them into OperationResult values, and route
handlers map them to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""

    default_message = "Operation failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    """Input violates a business validation rule."""

    default_message = "Invalid input"


class DuplicateError(DomainError):
    """Entry with the same normalized word already exists."""

    default_message = "Word already exists"


class NotFoundError(DomainError):
    """Requested entry does not exist."""

    default_message = "Not found"


class UnauthorizedError(DomainError):
    """Missing or incorrect shared passphrase on a remote write."""

    default_message = "Unauthorized"


class NotConfiguredError(DomainError):
    """Cloud operation attempted without a cloud configuration."""

    default_message = "Cloud sync is not configured"


class NetworkError(DomainError):
    """Transport failure or unexpected server error."""

    default_message = "Network request failed"
