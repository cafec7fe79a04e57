"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""
from typing import List, Optional


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainException):
    """Raised when input is malformed or missing."""

    def __init__(
        self,
        message: str = "Invalid input",
        errors: Optional[List[str]] = None,
        code: str = "VALIDATION_ERROR",
    ):
        super().__init__(message, code=code)
        self.errors = list(errors or [])


class InvalidDurationError(ValidationError):
    """Raised when a subscription duration is out of range."""

    def __init__(self, message: str = "Invalid subscription duration"):
        super().__init__(message, errors=[message], code="INVALID_DURATION")


class UnknownProductScopeError(ValidationError):
    """Raised when a product scope is not configured."""

    def __init__(self, message: str = "Unknown product scope"):
        super().__init__(message, errors=[message], code="UNKNOWN_PRODUCT_SCOPE")


class AuthenticationError(DomainException):
    """
    Raised when a request cannot be authenticated.

    The message is never returned to the caller; responses only say
    "Unauthorized".
    """

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, code="UNAUTHORIZED")


class InvalidSignatureError(AuthenticationError):
    """Raised when a request signature does not match."""

    def __init__(self, message: str = "Invalid request signature"):
        super().__init__(message)


class InvalidAdminCredentialsError(AuthenticationError):
    """Raised when the admin secret does not match."""

    def __init__(self, message: str = "Invalid admin credentials"):
        super().__init__(message)


class SubscriptionNotFoundError(DomainException):
    """Raised when renewing or cancelling a subscription that does not exist."""

    def __init__(self, message: str = "Subscription not found"):
        super().__init__(message, code="NOT_FOUND")


class StoreError(DomainException):
    """Base for failures reading or writing the backing document store."""


class StoreUnavailableError(StoreError):
    """Raised when the backing document store cannot be reached."""

    def __init__(self, message: str = "Subscription store unavailable"):
        super().__init__(message, code="STORE_UNAVAILABLE")


class CorruptRecordError(StoreError):
    """Raised when a stored document cannot be read as a subscription."""

    def __init__(self, message: str = "Stored subscription is unreadable"):
        super().__init__(message, code="CORRUPT_RECORD")


class ConfigurationError(DomainException):
    """Raised at startup when required configuration is missing."""

    def __init__(self, message: str = "Invalid configuration", missing: Optional[List[str]] = None):
        super().__init__(message, code="CONFIGURATION_ERROR")
        self.missing = list(missing or [])
