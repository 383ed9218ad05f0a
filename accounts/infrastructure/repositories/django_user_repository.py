"""
Django implementation of UserRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from django.db import IntegrityError, transaction

from accounts.domain.user import User
from accounts.infrastructure.models import User as UserModel
from accounts.ports.user_repository import UserRepository
from core.domain.exceptions import UsernameTakenError
from core.domain.value_objects import UserRole, Username


class DjangoUserRepository(UserRepository):
    """
    Django ORM implementation of UserRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Translates integrity errors into domain exceptions
    """

    def _to_domain(self, model: UserModel) -> User:
        """
        Convert Django model to domain entity.

        Args:
            model: Django User model

        Returns:
            User domain entity
        """
        return User(
            id=model.id,
            activation_id=model.activation_id,
            username=Username(model.username),
            password_hash=model.password_hash,
            role=UserRole(model.role),
            is_active=model.is_active,
            last_login=model.last_login,
            created_at=model.created_at,
        )

    def _to_model(self, user: User) -> UserModel:
        """
        Convert domain entity to an unsaved Django model.

        Args:
            user: User domain entity

        Returns:
            Django User model
        """
        return UserModel(
            id=user.id,
            activation_id=user.activation_id,
            username=str(user.username),
            password_hash=user.password_hash,
            role=user.role.value,
            is_active=user.is_active,
            last_login=user.last_login,
            created_at=user.created_at,
        )

    def add(self, user: User) -> User:
        """Insert a new user."""
        model = self._to_model(user)
        try:
            with transaction.atomic():
                model.save(force_insert=True)
        except IntegrityError as e:
            if "username" in str(e).lower():
                raise UsernameTakenError() from e
            raise
        return self._to_domain(model)

    def save(self, user: User) -> User:
        """Update an existing user."""
        # pylint: disable=no-member
        UserModel.objects.filter(id=user.id).update(
            password_hash=user.password_hash,
            role=user.role.value,
            is_active=user.is_active,
            last_login=user.last_login,
        )
        return user

    def find_by_activation_and_username(
        self, activation_id: uuid.UUID, username: str
    ) -> Optional[User]:
        """Find a user by activation and username."""
        try:
            # pylint: disable=no-member
            model = UserModel.objects.get(activation_id=activation_id, username=username)
            return self._to_domain(model)
        except UserModel.DoesNotExist:  # pylint: disable=no-member
            return None

    def find_by_activation(self, activation_id: uuid.UUID) -> List[User]:
        """Find all users of an activation."""
        # pylint: disable=no-member
        queryset = UserModel.objects.filter(activation_id=activation_id).order_by("created_at")
        return [self._to_domain(model) for model in queryset]

    def find_by_username(self, username: str) -> List[User]:
        """Find users with a username across all activations."""
        # pylint: disable=no-member
        queryset = UserModel.objects.filter(username=username).order_by("created_at")
        return [self._to_domain(model) for model in queryset]

    def count_by_activation(self, activation_id: uuid.UUID, active_only: bool = True) -> int:
        """Count users of an activation."""
        # pylint: disable=no-member
        queryset = UserModel.objects.filter(activation_id=activation_id)
        if active_only:
            queryset = queryset.filter(is_active=True)
        return queryset.count()

    def update_last_login(self, user_id: uuid.UUID, when: datetime) -> None:
        """Record a successful login."""
        # pylint: disable=no-member
        UserModel.objects.filter(id=user_id).update(last_login=when)

    def update_password_hash(self, user_id: uuid.UUID, password_hash: str) -> None:
        """Replace a user's password hash."""
        # pylint: disable=no-member
        UserModel.objects.filter(id=user_id).update(password_hash=password_hash)
