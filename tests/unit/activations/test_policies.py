"""
Unit tests for activation policies.
"""

from datetime import datetime, timezone

import pytest

from activations.domain.policies import (
    ActivationPolicy,
    EndDatePolicy,
    FixedTermPolicy,
    add_months,
)
from core.domain.value_objects import ProvisioningMode


class TestAddMonths:
    """Tests for calendar month arithmetic."""

    def test_simple(self):
        """Test adding months within a year."""
        start = datetime(2026, 1, 15, 8, 30, tzinfo=timezone.utc)
        assert add_months(start, 2) == datetime(2026, 3, 15, 8, 30, tzinfo=timezone.utc)

    def test_year_rollover(self):
        """Test adding months across a year boundary."""
        start = datetime(2026, 11, 1, tzinfo=timezone.utc)
        assert add_months(start, 14) == datetime(2028, 1, 1, tzinfo=timezone.utc)

    def test_clamps_to_month_end(self):
        """Test day is clamped to the end of a shorter month."""
        start = datetime(2026, 1, 31, tzinfo=timezone.utc)
        assert add_months(start, 1) == datetime(2026, 2, 28, tzinfo=timezone.utc)

    def test_leap_year(self):
        """Test clamping in a leap year."""
        start = datetime(2028, 1, 31, tzinfo=timezone.utc)
        assert add_months(start, 1) == datetime(2028, 2, 29, tzinfo=timezone.utc)

    def test_twelve_months(self):
        """Test a one-year term."""
        start = datetime(2026, 5, 20, tzinfo=timezone.utc)
        assert add_months(start, 12) == datetime(2027, 5, 20, tzinfo=timezone.utc)


class TestExpirationPolicies:
    """Tests for expiration strategies."""

    def test_fixed_term(self):
        """Test fixed term expiration."""
        start = datetime(2026, 1, 15, tzinfo=timezone.utc)
        assert FixedTermPolicy(12).expires_at(start) == datetime(2027, 1, 15, tzinfo=timezone.utc)

    def test_fixed_term_default(self):
        """Test default term is one year."""
        assert FixedTermPolicy().months == 12

    def test_fixed_term_invalid(self):
        """Test term must be positive."""
        with pytest.raises(ValueError):
            FixedTermPolicy(0)

    def test_end_date(self):
        """Test explicit end date ignores the start."""
        end = datetime(2027, 6, 30, tzinfo=timezone.utc)
        policy = EndDatePolicy(end)
        assert policy.expires_at(datetime(2026, 1, 1, tzinfo=timezone.utc)) == end
        assert policy.expires_at(datetime(2026, 9, 1, tzinfo=timezone.utc)) == end


class TestActivationPolicy:
    """Tests for ActivationPolicy."""

    def test_defaults(self):
        """Test default policy values."""
        policy = ActivationPolicy()

        assert policy.provisioning == ProvisioningMode.PRE_PROVISIONED
        assert policy.expiration == FixedTermPolicy(12)
        assert policy.default_max_users == 3
        assert policy.default_admin_username == "admin"
        assert policy.default_admin_password == "admin123"
        assert policy.count_disabled_users_as_seats is False
        assert policy.remote_authoritative is False

    def test_invalid_max_users(self):
        """Test default seat count must be positive."""
        with pytest.raises(ValueError):
            ActivationPolicy(default_max_users=0)

    def test_from_settings(self, settings):
        """Test policy is read from settings.ACTIVATION."""
        settings.ACTIVATION = {
            "CODE_PREFIX": "YRD",
            "PROVISIONING": "self_service",
            "TERM_MONTHS": 6,
            "DEFAULT_MAX_USERS": 5,
            "COUNT_DISABLED_USERS_AS_SEATS": True,
            "REMOTE_AUTHORITATIVE": True,
        }

        policy = ActivationPolicy.from_settings()

        assert policy.code_prefix == "YRD"
        assert policy.provisioning == ProvisioningMode.SELF_SERVICE
        assert policy.expiration == FixedTermPolicy(6)
        assert policy.default_max_users == 5
        assert policy.count_disabled_users_as_seats is True
        assert policy.remote_authoritative is True

    def test_from_settings_end_date(self, settings):
        """Test an END_DATE setting selects the end date policy."""
        settings.ACTIVATION = {"END_DATE": "2027-12-31T00:00:00"}

        policy = ActivationPolicy.from_settings()

        assert isinstance(policy.expiration, EndDatePolicy)
        assert policy.expiration.end_date == datetime(2027, 12, 31, tzinfo=timezone.utc)

    def test_from_settings_overrides(self, settings):
        """Test explicit overrides win over settings."""
        settings.ACTIVATION = {"PROVISIONING": "pre_provisioned"}

        policy = ActivationPolicy.from_settings({"PROVISIONING": "self_service"})

        assert policy.provisioning == ProvisioningMode.SELF_SERVICE
