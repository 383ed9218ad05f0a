"""
MetalType Django ORM model.

This is the infrastructure layer model for metal types.
Domain entities are in catalog.domain.metal_type.
"""
import uuid

from django.db import models
from django.utils import timezone


class MetalType(models.Model):
    """
    Default reference data row owned by an activation.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    activation = models.ForeignKey(
        "activations.Activation",
        on_delete=models.PROTECT,
        related_name="metal_types",
    )
    symbol = models.CharField(max_length=10)
    name = models.CharField(max_length=100)
    price_per_unit = models.DecimalField(max_digits=10, decimal_places=2)
    unit = models.CharField(max_length=20, default="lb")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "metal_types"
        ordering = ["symbol"]
        constraints = [
            models.UniqueConstraint(
                fields=["activation", "symbol"], name="uniq_activation_symbol"
            ),
        ]

    def __str__(self):
        return f"{self.symbol} ({self.name})"
