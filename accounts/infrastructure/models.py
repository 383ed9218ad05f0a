"""
User Django ORM model.

This is the infrastructure layer model for activation users.
Domain entities are in accounts.domain.user.
"""
import uuid

from django.db import models
from django.utils import timezone


class User(models.Model):
    """
    A login bound to one activation.
    Usernames are unique per activation, not globally.
    """

    ROLE_CHOICES = [
        ("admin", "Admin"),
        ("operator", "Operator"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    activation = models.ForeignKey(
        "activations.Activation",
        on_delete=models.PROTECT,
        related_name="users",
    )
    username = models.CharField(max_length=150)
    password_hash = models.CharField(max_length=255)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default="operator")
    is_active = models.BooleanField(default=True)
    last_login = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "users"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["activation", "username"], name="uniq_activation_username"
            ),
        ]
        indexes = [
            models.Index(fields=["username"], name="users_username_idx"),
            models.Index(fields=["activation", "is_active"], name="users_act_active_idx"),
        ]

    def __str__(self):
        return f"{self.username} ({self.role})"
