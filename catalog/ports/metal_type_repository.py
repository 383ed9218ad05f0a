"""
MetalType repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import List
import uuid

from catalog.domain.metal_type import MetalType


class MetalTypeRepository(ABC):
    """Abstract repository for MetalType entities."""

    @abstractmethod
    def add_many(self, metal_types: List[MetalType]) -> List[MetalType]:
        """
        Insert several metal types.

        Args:
            metal_types: Entities to insert

        Returns:
            Saved entities

        Raises:
            ProvisioningError: If a row cannot be inserted
        """
        pass

    @abstractmethod
    def find_by_activation(self, activation_id: uuid.UUID) -> List[MetalType]:
        """
        Find all metal types of an activation.

        Args:
            activation_id: Activation UUID

        Returns:
            List of MetalType entities ordered by symbol
        """
        pass
