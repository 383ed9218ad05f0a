"""
User repository port (interface).

This defines the contract for user persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
import uuid

from accounts.domain.user import User


class UserRepository(ABC):
    """
    Abstract repository for User entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    def add(self, user: User) -> User:
        """
        Insert a new user.

        Args:
            user: User entity to insert

        Returns:
            Saved user entity

        Raises:
            UsernameTakenError: If the username exists under the activation
        """
        pass

    @abstractmethod
    def save(self, user: User) -> User:
        """
        Update an existing user.

        Args:
            user: User entity to save

        Returns:
            Saved user entity
        """
        pass

    @abstractmethod
    def find_by_activation_and_username(
        self, activation_id: uuid.UUID, username: str
    ) -> Optional[User]:
        """
        Find a user by activation and username.

        Args:
            activation_id: Activation UUID
            username: Username

        Returns:
            User entity or None if not found
        """
        pass

    @abstractmethod
    def find_by_activation(self, activation_id: uuid.UUID) -> List[User]:
        """
        Find all users of an activation.

        Args:
            activation_id: Activation UUID

        Returns:
            List of User entities
        """
        pass

    @abstractmethod
    def find_by_username(self, username: str) -> List[User]:
        """
        Find users with a username across all activations.

        Args:
            username: Username

        Returns:
            List of User entities
        """
        pass

    @abstractmethod
    def count_by_activation(self, activation_id: uuid.UUID, active_only: bool = True) -> int:
        """
        Count users of an activation.

        Args:
            activation_id: Activation UUID
            active_only: Count only enabled users

        Returns:
            Number of users
        """
        pass

    @abstractmethod
    def update_last_login(self, user_id: uuid.UUID, when: datetime) -> None:
        """
        Record a successful login.

        Args:
            user_id: User UUID
            when: Login time
        """
        pass

    @abstractmethod
    def update_password_hash(self, user_id: uuid.UUID, password_hash: str) -> None:
        """
        Replace a user's password hash.

        Args:
            user_id: User UUID
            password_hash: New hash
        """
        pass
