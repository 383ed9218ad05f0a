"""
Activation repository port (interface).

This defines the contract for activation persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional
import uuid

from activations.domain.activation import Activation


class ActivationRepository(ABC):
    """
    Abstract repository for Activation entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    def add(self, activation: Activation) -> Activation:
        """
        Insert a new activation.

        Args:
            activation: Activation entity to insert

        Returns:
            Saved activation entity

        Raises:
            DuplicateActivationCodeError: If the code already exists
        """
        pass

    @abstractmethod
    def save(self, activation: Activation) -> Activation:
        """
        Update an existing activation. The code itself is never changed.

        Args:
            activation: Activation entity to save

        Returns:
            Saved activation entity
        """
        pass

    @abstractmethod
    def find_by_code(self, activation_code: str) -> Optional[Activation]:
        """
        Find an activation by its code.

        Args:
            activation_code: Activation code

        Returns:
            Activation entity or None if not found
        """
        pass

    @abstractmethod
    def find_by_id(self, activation_id: uuid.UUID) -> Optional[Activation]:
        """
        Find an activation by ID.

        Args:
            activation_id: Activation UUID

        Returns:
            Activation entity or None if not found
        """
        pass

    @abstractmethod
    def find_all(self) -> List[Activation]:
        """
        List every activation, newest first.

        Returns:
            List of Activation entities
        """
        pass

    @abstractmethod
    def lock_for_update(self, activation_code: str) -> Optional[Activation]:
        """
        Load an activation and lock its row until the current transaction ends.

        Args:
            activation_code: Activation code

        Returns:
            Activation entity or None if not found
        """
        pass

    @abstractmethod
    def claim(self, activation: Activation) -> bool:
        """
        Persist a claimed activation only if the row is still unclaimed.

        Args:
            activation: Activation entity after ``Activation.claim``

        Returns:
            True if this call claimed the row, False if someone else did first
        """
        pass
