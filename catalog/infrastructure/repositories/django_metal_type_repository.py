"""
Django implementation of MetalTypeRepository port.
"""

import logging
import uuid
from typing import List

from django.db import IntegrityError, transaction

from catalog.domain.metal_type import MetalType
from catalog.infrastructure.models import MetalType as MetalTypeModel
from catalog.ports.metal_type_repository import MetalTypeRepository
from core.domain.exceptions import ProvisioningError

logger = logging.getLogger(__name__)


class DjangoMetalTypeRepository(MetalTypeRepository):
    """Django ORM implementation of MetalTypeRepository."""

    def _to_domain(self, model: MetalTypeModel) -> MetalType:
        """Convert Django model to domain entity."""
        return MetalType(
            id=model.id,
            activation_id=model.activation_id,
            symbol=model.symbol,
            name=model.name,
            price_per_unit=model.price_per_unit,
            unit=model.unit,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, metal_type: MetalType) -> MetalTypeModel:
        """Convert domain entity to an unsaved Django model."""
        return MetalTypeModel(
            id=metal_type.id,
            activation_id=metal_type.activation_id,
            symbol=metal_type.symbol,
            name=metal_type.name,
            price_per_unit=metal_type.price_per_unit,
            unit=metal_type.unit,
            is_active=metal_type.is_active,
            created_at=metal_type.created_at,
            updated_at=metal_type.updated_at,
        )

    def add_many(self, metal_types: List[MetalType]) -> List[MetalType]:
        """
        Insert several metal types in one savepoint.

        Raises:
            ProvisioningError: If any row violates a constraint
        """
        models = [self._to_model(metal_type) for metal_type in metal_types]
        try:
            with transaction.atomic():
                # pylint: disable=no-member
                MetalTypeModel.objects.bulk_create(models)
        except IntegrityError as e:
            logger.error("Failed to insert default metal types: %s", e)
            raise ProvisioningError("Failed to insert default metal types") from e
        return [self._to_domain(model) for model in models]

    def find_by_activation(self, activation_id: uuid.UUID) -> List[MetalType]:
        """Find all metal types of an activation."""
        # pylint: disable=no-member
        queryset = MetalTypeModel.objects.filter(activation_id=activation_id).order_by("symbol")
        return [self._to_domain(model) for model in queryset]
