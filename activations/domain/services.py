"""
Activation domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""

import secrets
import time
import uuid
from typing import Callable, Optional

from accounts.ports.user_repository import UserRepository
from activations.domain.activation import Activation
from core.domain.exceptions import SeatLimitExceededError

BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(value: int) -> str:
    """Encode a non-negative integer in base 36."""
    if value < 0:
        raise ValueError("Value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


class ActivationCodeGenerator:
    """
    Domain service generating activation codes.

    Codes look like ``GRC-<base36 ms timestamp>-<16 hex chars>``,
    upper-cased. The random part carries 64 bits of entropy.
    """

    def __init__(self, prefix: str = "GRC", clock: Optional[Callable[[], float]] = None):
        self.prefix = prefix
        self._clock = clock or time.time

    def generate(self) -> str:
        """Generate a new activation code."""
        timestamp = to_base36(int(self._clock() * 1000))
        random_part = secrets.token_hex(8)
        return f"{self.prefix}-{timestamp}-{random_part}".upper()


class SeatManager:
    """Domain service for managing activation seats."""

    def __init__(self, user_repository: UserRepository, count_disabled_users: bool = False):
        self.user_repository = user_repository
        self.count_disabled_users = count_disabled_users

    def count_used_seats(self, activation_id: uuid.UUID) -> int:
        """
        Count seats in use for an activation.

        Args:
            activation_id: Activation UUID

        Returns:
            Number of users occupying a seat
        """
        return self.user_repository.count_by_activation(
            activation_id, active_only=not self.count_disabled_users
        )

    def seats_remaining(self, activation: Activation) -> int:
        """Number of free seats, never negative."""
        return max(0, activation.max_users - self.count_used_seats(activation.id))

    def ensure_seat_available(self, activation: Activation) -> None:
        """
        Check that one more user fits.

        Raises:
            SeatLimitExceededError: If every seat is taken
        """
        if self.count_used_seats(activation.id) >= activation.max_users:
            raise SeatLimitExceededError(f"User limit reached ({activation.max_users})")

    def ensure_within_limit(self, activation: Activation) -> None:
        """
        Check the seat count after an insert.

        Raises:
            SeatLimitExceededError: If the count went past the limit
        """
        if self.count_used_seats(activation.id) > activation.max_users:
            raise SeatLimitExceededError(f"User limit reached ({activation.max_users})")
