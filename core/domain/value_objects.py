"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass
from enum import Enum


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
class Email(ValueObject):
    """Email value object with validation."""

    value: str

    def __post_init__(self):
        """Validate email format."""
        if not self.value or "@" not in self.value:
            raise ValueError(f"Invalid email address: {self.value}")

    def __str__(self) -> str:
        """Return email as string."""
        return self.value


@dataclass(frozen=True)
class ActivationCode(ValueObject):
    """Activation code value object."""

    value: str

    def __post_init__(self):
        """Validate code format."""
        if not self.value or len(self.value.strip()) == 0:
            raise ValueError("Activation code cannot be empty")
        if len(self.value) > 100:
            raise ValueError("Activation code too long")

    def __str__(self) -> str:
        """Return code as string."""
        return self.value


@dataclass(frozen=True)
class Username(ValueObject):
    """Username value object, unique only within one activation."""

    value: str

    def __post_init__(self):
        """Validate username."""
        if not self.value or len(self.value.strip()) == 0:
            raise ValueError("Username cannot be empty")
        if self.value != self.value.strip():
            raise ValueError("Username cannot start or end with whitespace")
        if len(self.value) > 150:
            raise ValueError("Username too long")

    def __str__(self) -> str:
        """Return username as string."""
        return self.value


class UserRole(Enum):
    """User role value object."""

    ADMIN = "admin"
    OPERATOR = "operator"

    def __str__(self) -> str:
        """Return role as string."""
        return self.value


class ProvisioningMode(Enum):
    """How new activation codes are handed out."""

    # Code is active immediately with a default admin and seed data
    PRE_PROVISIONED = "pre_provisioned"
    # Code is created empty and claimed later by the customer
    SELF_SERVICE = "self_service"

    def __str__(self) -> str:
        """Return mode as string."""
        return self.value
