"""
Activation domain entity.

This is the core domain entity representing a customer activation
(license). It contains business logic and is independent of infrastructure.
"""

import math
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from activations.domain.policies import add_months
from core.domain.exceptions import (
    ActivationAlreadyActivatedError,
    ActivationExpiredError,
    ActivationNotActivatedError,
)
from core.domain.value_objects import ActivationCode, Email


@dataclass(frozen=True)
class Activation:
    """
    Activation domain entity.

    Grants one company time-boxed, seat-limited access.
    This is an immutable value object with business logic.
    """

    id: uuid.UUID
    activation_code: ActivationCode
    company_name: str
    contact_person: Optional[str]
    contact_phone: Optional[str]
    contact_email: Optional[Email]
    activated_at: Optional[datetime]
    expires_at: Optional[datetime]
    is_active: bool
    max_users: int
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate activation entity."""
        if not self.company_name or not self.company_name.strip():
            raise ValueError("Company name is required")
        if self.max_users < 1:
            raise ValueError("Max users must be at least 1")
        if self.activated_at and self.expires_at and self.expires_at <= self.activated_at:
            raise ValueError("Expiration must be after activation time")

    @classmethod
    def _new(
        cls,
        activation_code: str,
        company_name: str,
        max_users: int,
        contact_person: Optional[str],
        contact_phone: Optional[str],
        contact_email: Optional[str],
        activated_at: Optional[datetime],
        expires_at: Optional[datetime],
        is_active: bool,
        now: datetime,
        activation_id: Optional[uuid.UUID],
    ) -> "Activation":
        return cls(
            id=activation_id or uuid.uuid4(),
            activation_code=ActivationCode(activation_code),
            company_name=company_name,
            contact_person=contact_person or None,
            contact_phone=contact_phone or None,
            contact_email=Email(contact_email) if contact_email else None,
            activated_at=activated_at,
            expires_at=expires_at,
            is_active=is_active,
            max_users=max_users,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def create_provisioned(
        cls,
        activation_code: str,
        company_name: str,
        expires_at: datetime,
        max_users: int = 3,
        contact_person: Optional[str] = None,
        contact_phone: Optional[str] = None,
        contact_email: Optional[str] = None,
        now: Optional[datetime] = None,
        activation_id: Optional[uuid.UUID] = None,
    ) -> "Activation":
        """
        Create an activation that is usable immediately.

        Args:
            activation_code: Generated code
            company_name: Customer company name
            expires_at: Expiration datetime
            max_users: Seat limit
            contact_person: Optional contact name
            contact_phone: Optional contact phone
            contact_email: Optional contact email
            now: Activation time (defaults to current UTC time)
            activation_id: Optional UUID (generated if not provided)

        Returns:
            Active Activation entity
        """
        now = now or datetime.now(timezone.utc)
        return cls._new(
            activation_code,
            company_name,
            max_users,
            contact_person,
            contact_phone,
            contact_email,
            activated_at=now,
            expires_at=expires_at,
            is_active=True,
            now=now,
            activation_id=activation_id,
        )

    @classmethod
    def create_unclaimed(
        cls,
        activation_code: str,
        company_name: str,
        max_users: int = 3,
        expires_at: Optional[datetime] = None,
        contact_person: Optional[str] = None,
        contact_phone: Optional[str] = None,
        contact_email: Optional[str] = None,
        now: Optional[datetime] = None,
        activation_id: Optional[uuid.UUID] = None,
    ) -> "Activation":
        """
        Create an activation that the customer claims later.

        An optional ``expires_at`` is a deadline for claiming the code.

        Returns:
            Inactive, unclaimed Activation entity
        """
        now = now or datetime.now(timezone.utc)
        return cls._new(
            activation_code,
            company_name,
            max_users,
            contact_person,
            contact_phone,
            contact_email,
            activated_at=None,
            expires_at=expires_at,
            is_active=False,
            now=now,
            activation_id=activation_id,
        )

    @property
    def code(self) -> str:
        """Activation code as plain string."""
        return str(self.activation_code)

    @property
    def is_claimed(self) -> bool:
        """Check if the code has ever been activated."""
        return self.activated_at is not None or self.is_active

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """
        Check if the activation is past its expiration.

        An activation without an expiration never expires.
        """
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now > self.expires_at

    def days_left(self, now: Optional[datetime] = None) -> Optional[int]:
        """
        Whole days remaining before expiration, rounded up and floored at 0.

        Returns:
            Number of days, or None when there is no expiration
        """
        if self.expires_at is None:
            return None
        now = now or datetime.now(timezone.utc)
        seconds = (self.expires_at - now).total_seconds()
        return max(0, math.ceil(seconds / 86400))

    def claim(self, expires_at: datetime, now: Optional[datetime] = None) -> "Activation":
        """
        Activate an unclaimed code.

        Args:
            expires_at: Expiration computed by the expiration policy
            now: Activation time

        Returns:
            New Activation instance in the active state

        Raises:
            ActivationAlreadyActivatedError: If the code was activated before
            ActivationExpiredError: If a preset claim deadline has passed
        """
        now = now or datetime.now(timezone.utc)
        if self.is_claimed:
            raise ActivationAlreadyActivatedError()
        if self.is_expired(now):
            raise ActivationExpiredError("Activation code has expired")
        return replace(
            self,
            activated_at=now,
            expires_at=expires_at,
            is_active=True,
            updated_at=now,
        )

    def renew(self, extra_months: int, now: Optional[datetime] = None) -> "Activation":
        """
        Extend the expiration by whole months.

        Remaining time is kept: the new expiration is computed from the
        current one, or from ``now`` when there is none.
        """
        if extra_months < 1:
            raise ValueError("Renewal must be at least one month")
        now = now or datetime.now(timezone.utc)
        base = self.expires_at or now
        return replace(self, expires_at=add_months(base, extra_months), updated_at=now)

    def disable(self, now: Optional[datetime] = None) -> "Activation":
        """
        Return a disabled copy of this activation.

        Raises:
            ActivationNotActivatedError: If the code was never activated
        """
        if self.activated_at is None:
            raise ActivationNotActivatedError()
        if not self.is_active:
            return self
        return replace(self, is_active=False, updated_at=now or datetime.now(timezone.utc))
