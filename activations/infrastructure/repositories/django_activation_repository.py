"""
Django implementation of ActivationRepository port.

This adapter converts between domain entities and Django ORM models.
"""

import uuid
from typing import List, Optional

from django.db import IntegrityError, transaction

from activations.domain.activation import Activation
from activations.infrastructure.models import Activation as ActivationModel
from activations.ports.activation_repository import ActivationRepository
from core.domain.exceptions import DuplicateActivationCodeError
from core.domain.value_objects import ActivationCode, Email


class DjangoActivationRepository(ActivationRepository):
    """
    Django ORM implementation of ActivationRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Implements repository interface
    """

    def _to_domain(self, model: ActivationModel) -> Activation:
        """
        Convert Django model to domain entity.

        Args:
            model: Django Activation model

        Returns:
            Activation domain entity
        """
        return Activation(
            id=model.id,
            activation_code=ActivationCode(model.activation_code),
            company_name=model.company_name,
            contact_person=model.contact_person,
            contact_phone=model.contact_phone,
            contact_email=Email(model.contact_email) if model.contact_email else None,
            activated_at=model.activated_at,
            expires_at=model.expires_at,
            is_active=model.is_active,
            max_users=model.max_users,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, activation: Activation) -> ActivationModel:
        """
        Convert domain entity to an unsaved Django model.

        Args:
            activation: Activation domain entity

        Returns:
            Django Activation model
        """
        return ActivationModel(
            id=activation.id,
            activation_code=activation.code,
            company_name=activation.company_name,
            contact_person=activation.contact_person,
            contact_phone=activation.contact_phone,
            contact_email=str(activation.contact_email) if activation.contact_email else None,
            activated_at=activation.activated_at,
            expires_at=activation.expires_at,
            is_active=activation.is_active,
            max_users=activation.max_users,
            created_at=activation.created_at,
            updated_at=activation.updated_at,
        )

    def add(self, activation: Activation) -> Activation:
        """
        Insert a new activation.

        Raises:
            DuplicateActivationCodeError: If the code already exists
        """
        model = self._to_model(activation)
        try:
            with transaction.atomic():
                model.save(force_insert=True)
        except IntegrityError as e:
            if "activation_code" in str(e).lower():
                raise DuplicateActivationCodeError(
                    f"Activation code {activation.code} already exists"
                ) from e
            raise
        return self._to_domain(model)

    def save(self, activation: Activation) -> Activation:
        """Update mutable fields of an existing activation."""
        # pylint: disable=no-member
        ActivationModel.objects.filter(id=activation.id).update(
            company_name=activation.company_name,
            contact_person=activation.contact_person,
            contact_phone=activation.contact_phone,
            contact_email=str(activation.contact_email) if activation.contact_email else None,
            activated_at=activation.activated_at,
            expires_at=activation.expires_at,
            is_active=activation.is_active,
            max_users=activation.max_users,
            updated_at=activation.updated_at,
        )
        return activation

    def find_by_code(self, activation_code: str) -> Optional[Activation]:
        """Find an activation by its code."""
        try:
            # pylint: disable=no-member
            model = ActivationModel.objects.get(activation_code=activation_code)
            return self._to_domain(model)
        except ActivationModel.DoesNotExist:  # pylint: disable=no-member
            return None

    def find_by_id(self, activation_id: uuid.UUID) -> Optional[Activation]:
        """Find an activation by ID."""
        try:
            # pylint: disable=no-member
            model = ActivationModel.objects.get(id=activation_id)
            return self._to_domain(model)
        except ActivationModel.DoesNotExist:  # pylint: disable=no-member
            return None

    def find_all(self) -> List[Activation]:
        """List every activation, newest first."""
        # pylint: disable=no-member
        return [self._to_domain(model) for model in ActivationModel.objects.order_by("-created_at")]

    def lock_for_update(self, activation_code: str) -> Optional[Activation]:
        """
        Load and lock an activation row.

        Must be called inside a transaction; SQLite ignores the lock.
        """
        # pylint: disable=no-member
        model = (
            ActivationModel.objects.select_for_update()
            .filter(activation_code=activation_code)
            .first()
        )
        return self._to_domain(model) if model else None

    def claim(self, activation: Activation) -> bool:
        """Conditionally persist a claim on a still-unclaimed row."""
        # pylint: disable=no-member
        updated = ActivationModel.objects.filter(
            id=activation.id,
            activated_at__isnull=True,
            is_active=False,
        ).update(
            activated_at=activation.activated_at,
            expires_at=activation.expires_at,
            is_active=True,
            updated_at=activation.updated_at,
        )
        return updated == 1
