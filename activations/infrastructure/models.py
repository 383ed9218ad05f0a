"""
Activation Django ORM model.

This is the infrastructure layer model for activations.
Domain entities are in activations.domain.activation.
"""
import uuid

from django.db import models
from django.utils import timezone


class Activation(models.Model):
    """
    A customer activation (license) identified by its activation code.
    Users and default reference data hang off this row.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    activation_code = models.CharField(max_length=100, unique=True)
    company_name = models.CharField(max_length=255)
    contact_person = models.CharField(max_length=255, null=True, blank=True)
    contact_phone = models.CharField(max_length=50, null=True, blank=True)
    contact_email = models.CharField(max_length=255, null=True, blank=True)
    activated_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=False, db_index=True)
    max_users = models.PositiveIntegerField(default=3)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "activations"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["is_active", "expires_at"], name="activations_active_exp_idx"),
        ]

    def clean(self):
        """Validate activation fields."""
        from django.core.exceptions import ValidationError

        if not self.activation_code or len(self.activation_code.strip()) == 0:
            raise ValidationError("Activation code cannot be empty")
        if self.activated_at and self.expires_at and self.expires_at <= self.activated_at:
            raise ValidationError("Expiration must be after activation time")

    def __str__(self):
        return f"{self.activation_code} ({self.company_name})"
