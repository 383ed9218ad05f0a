"""
User domain entity.

Users belong to exactly one activation; usernames are unique
only within that activation.
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from core.domain.value_objects import UserRole, Username


@dataclass(frozen=True)
class User:
    """
    User domain entity.

    Immutable; state changes return a new instance.
    """

    id: uuid.UUID
    activation_id: uuid.UUID
    username: Username
    password_hash: str
    role: UserRole
    is_active: bool
    last_login: Optional[datetime]
    created_at: datetime

    def __post_init__(self):
        """Validate user entity."""
        if not self.activation_id:
            raise ValueError("Activation ID is required")
        if not self.password_hash:
            raise ValueError("Password hash is required")

    @classmethod
    def create(
        cls,
        activation_id: uuid.UUID,
        username: str,
        password_hash: str,
        role: UserRole = UserRole.OPERATOR,
        user_id: Optional[uuid.UUID] = None,
    ) -> "User":
        """
        Create a new User entity.

        Args:
            activation_id: Owning activation UUID
            username: Username, unique within the activation
            password_hash: Already hashed password
            role: User role
            user_id: Optional UUID (generated if not provided)

        Returns:
            User entity instance
        """
        return cls(
            id=user_id or uuid.uuid4(),
            activation_id=activation_id,
            username=Username(username),
            password_hash=password_hash,
            role=role,
            is_active=True,
            last_login=None,
            created_at=datetime.now(timezone.utc),
        )

    def disable(self) -> "User":
        """Return a disabled copy of this user."""
        if not self.is_active:
            return self
        return replace(self, is_active=False)

    def with_password_hash(self, password_hash: str) -> "User":
        """Return a copy of this user with a new password hash."""
        return replace(self, password_hash=password_hash)

    def record_login(self, when: Optional[datetime] = None) -> "User":
        """Return a copy of this user with last_login set."""
        return replace(self, last_login=when or datetime.now(timezone.utc))
