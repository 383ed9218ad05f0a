"""
Activation policies.

Policies capture the knobs that differ between deployments:
how codes are provisioned, how long they last, and how seats
are counted.
"""

import calendar
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from core.domain.value_objects import ProvisioningMode


def add_months(value: datetime, months: int) -> datetime:
    """
    Add calendar months to a datetime.

    The day is clamped to the last day of the target month,
    so Jan 31 + 1 month is Feb 28 (or 29).
    """
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


class ExpirationPolicy(ABC):
    """Strategy computing the expiration of a newly activated code."""

    @abstractmethod
    def expires_at(self, start: datetime) -> datetime:
        """
        Compute the expiration for an activation starting at ``start``.

        Args:
            start: Activation time

        Returns:
            Expiration datetime
        """
        pass


@dataclass(frozen=True)
class FixedTermPolicy(ExpirationPolicy):
    """Expire a fixed number of months after activation."""

    months: int = 12

    def __post_init__(self):
        if self.months < 1:
            raise ValueError("Term must be at least one month")

    def expires_at(self, start: datetime) -> datetime:
        return add_months(start, self.months)


@dataclass(frozen=True)
class EndDatePolicy(ExpirationPolicy):
    """Expire on an explicit end date regardless of activation time."""

    end_date: datetime

    def expires_at(self, start: datetime) -> datetime:
        return self.end_date


@dataclass(frozen=True)
class ActivationPolicy:
    """
    Deployment policy for the activation manager.

    Attributes:
        provisioning: Pre-provisioned or self-service code handling
        expiration: Strategy for the initial expiration
        default_max_users: Seats granted when none are requested
        default_admin_username: Username of the provisioned admin
        default_admin_password: Initial admin password for pre-provisioned codes
        count_disabled_users_as_seats: Whether disabled users keep their seat
        remote_authoritative: Whether the backup server can deny logins
        code_prefix: Prefix of generated activation codes
    """

    provisioning: ProvisioningMode = ProvisioningMode.PRE_PROVISIONED
    expiration: ExpirationPolicy = field(default_factory=FixedTermPolicy)
    default_max_users: int = 3
    default_admin_username: str = "admin"
    default_admin_password: str = "admin123"
    count_disabled_users_as_seats: bool = False
    remote_authoritative: bool = False
    code_prefix: str = "GRC"

    def __post_init__(self):
        if self.default_max_users < 1:
            raise ValueError("Default max users must be at least 1")
        if not self.code_prefix:
            raise ValueError("Code prefix is required")

    @classmethod
    def from_settings(cls, overrides: Optional[Dict[str, Any]] = None) -> "ActivationPolicy":
        """
        Build a policy from ``settings.ACTIVATION``.

        Args:
            overrides: Optional keys replacing the configured values

        Returns:
            ActivationPolicy instance
        """
        from django.conf import settings

        config = dict(getattr(settings, "ACTIVATION", {}))
        config.update(overrides or {})

        end_date = config.get("END_DATE")
        if end_date:
            if isinstance(end_date, str):
                end_date = datetime.fromisoformat(end_date)
            if end_date.tzinfo is None:
                end_date = end_date.replace(tzinfo=timezone.utc)
            expiration = EndDatePolicy(end_date)
        else:
            expiration = FixedTermPolicy(int(config.get("TERM_MONTHS", 12)))

        return cls(
            provisioning=ProvisioningMode(config.get("PROVISIONING", "pre_provisioned")),
            expiration=expiration,
            default_max_users=int(config.get("DEFAULT_MAX_USERS", 3)),
            default_admin_username=config.get("DEFAULT_ADMIN_USERNAME", "admin"),
            default_admin_password=config.get("DEFAULT_ADMIN_PASSWORD", "admin123"),
            count_disabled_users_as_seats=bool(
                config.get("COUNT_DISABLED_USERS_AS_SEATS", False)
            ),
            remote_authoritative=bool(config.get("REMOTE_AUTHORITATIVE", False)),
            code_prefix=config.get("CODE_PREFIX", "GRC"),
        )
