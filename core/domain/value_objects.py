"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import re
from abc import ABC
from dataclasses import dataclass
from enum import Enum

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_email_shaped(value) -> bool:
    """Return True if value looks like local-part@domain.tld."""
    return isinstance(value, str) and bool(EMAIL_PATTERN.match(value))


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class SubjectId(ValueObject):
    """
    Subject identifier (the username a subscription belongs to).

    Always stored normalized: surrounding whitespace stripped, lower-cased.
    """

    value: str

    def __post_init__(self):
        """Normalize and validate the subject id."""
        if not isinstance(self.value, str):
            raise ValueError(f"Invalid subject id: {self.value!r}")
        normalized = self.value.strip().lower()
        if not is_email_shaped(normalized):
            raise ValueError(f"Invalid subject id: {self.value}")
        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        """Return subject id as string."""
        return self.value


@dataclass(frozen=True)
class ProductScope(ValueObject):
    """Product scope slug partitioning subscription records."""

    value: str

    def __post_init__(self):
        """Validate slug format."""
        if not self.value:
            raise ValueError("Product scope cannot be empty")
        if not self.value.replace("-", "").replace("_", "").isalnum():
            raise ValueError(f"Invalid product scope format: {self.value}")

    def __str__(self) -> str:
        """Return scope as string."""
        return self.value


class SubscriptionState(Enum):
    """Derived subscription state."""

    NONE = "none"
    ACTIVE = "active"
    EXPIRED = "expired"

    def __str__(self) -> str:
        """Return state as string."""
        return self.value


class ResultCode(Enum):
    """Tagged outcome of a subscription operation."""

    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    NO_SUBSCRIPTION = "NO_SUBSCRIPTION"
    SUBSCRIBED = "SUBSCRIBED"
    RENEWED = "RENEWED"
    CANCELLED = "CANCELLED"
    NOT_FOUND = "NOT_FOUND"
    ERROR = "ERROR"
    OK = "OK"

    def __str__(self) -> str:
        """Return code as string."""
        return self.value
