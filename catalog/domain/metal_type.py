"""
MetalType domain entity.

A metal type is a priced reference-data row owned by one activation.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional


@dataclass(frozen=True)
class MetalType:
    """
    MetalType domain entity.

    Symbols are unique within an activation.
    """

    id: uuid.UUID
    activation_id: uuid.UUID
    symbol: str
    name: str
    price_per_unit: Decimal
    unit: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate metal type entity."""
        if not self.activation_id:
            raise ValueError("Activation ID is required")
        if not self.symbol or not self.symbol.strip():
            raise ValueError("Metal symbol is required")
        if not self.name or not self.name.strip():
            raise ValueError("Metal name is required")
        if self.price_per_unit < 0:
            raise ValueError("Price per unit cannot be negative")

    @classmethod
    def create(
        cls,
        activation_id: uuid.UUID,
        symbol: str,
        name: str,
        price_per_unit: Decimal,
        unit: str = "lb",
        metal_type_id: Optional[uuid.UUID] = None,
    ) -> "MetalType":
        """
        Create a new MetalType entity.

        Args:
            activation_id: Owning activation UUID
            symbol: Short symbol (Cu, Al, ...)
            name: Display name
            price_per_unit: Price per unit
            unit: Unit of measure
            metal_type_id: Optional UUID (generated if not provided)

        Returns:
            MetalType entity instance
        """
        now = datetime.now(timezone.utc)
        return cls(
            id=metal_type_id or uuid.uuid4(),
            activation_id=activation_id,
            symbol=symbol,
            name=name,
            price_per_unit=Decimal(price_per_unit),
            unit=unit,
            is_active=True,
            created_at=now,
            updated_at=now,
        )


@dataclass(frozen=True)
class MetalTypeSeed:
    """Seed row for the default price list."""

    symbol: str
    name: str
    price_per_unit: Decimal
    unit: str = "lb"


DEFAULT_METAL_TYPES = (
    MetalTypeSeed("Cu", "Copper", Decimal("3.50")),
    MetalTypeSeed("Al", "Aluminum", Decimal("0.80")),
    MetalTypeSeed("Fe", "Iron", Decimal("0.30")),
    MetalTypeSeed("Pb", "Lead", Decimal("1.20")),
    MetalTypeSeed("Zn", "Zinc", Decimal("1.00")),
    MetalTypeSeed("Ni", "Nickel", Decimal("6.50")),
    MetalTypeSeed("Br", "Brass", Decimal("2.80")),
    MetalTypeSeed("St", "Steel", Decimal("0.40")),
)


def build_default_metal_types(activation_id: uuid.UUID) -> List[MetalType]:
    """Build the default metal types for a freshly activated account."""
    return [
        MetalType.create(
            activation_id=activation_id,
            symbol=seed.symbol,
            name=seed.name,
            price_per_unit=seed.price_per_unit,
            unit=seed.unit,
        )
        for seed in DEFAULT_METAL_TYPES
    ]
