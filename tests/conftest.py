"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timedelta, timezone

import pytest

from accounts.domain.password_hasher import PasswordHasher
from accounts.infrastructure.repositories.django_user_repository import DjangoUserRepository
from activations.application.commands.create_activation import CompanyProfile
from activations.application.services.activation_manager import ActivationManager
from activations.domain.activation import Activation
from activations.domain.policies import ActivationPolicy, FixedTermPolicy
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from catalog.infrastructure.repositories.django_metal_type_repository import (
    DjangoMetalTypeRepository,
)
from core.domain.value_objects import ProvisioningMode


class FakeClock:
    """Controllable clock returning aware UTC datetimes."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    """Fixture for a clock frozen at a known instant."""
    return FakeClock(datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def activation_repository():
    """Fixture for ActivationRepository."""
    return DjangoActivationRepository()


@pytest.fixture
def user_repository():
    """Fixture for UserRepository."""
    return DjangoUserRepository()


@pytest.fixture
def metal_type_repository():
    """Fixture for MetalTypeRepository."""
    return DjangoMetalTypeRepository()


@pytest.fixture
def password_hasher():
    """Fixture for PasswordHasher using the configured default algorithm."""
    return PasswordHasher()


@pytest.fixture
def policy():
    """Fixture for a pre-provisioned activation policy."""
    return ActivationPolicy(
        provisioning=ProvisioningMode.PRE_PROVISIONED,
        expiration=FixedTermPolicy(12),
    )


@pytest.fixture
def self_service_policy():
    """Fixture for a self-service activation policy."""
    return ActivationPolicy(
        provisioning=ProvisioningMode.SELF_SERVICE,
        expiration=FixedTermPolicy(12),
    )


@pytest.fixture
def company():
    """Fixture for a sample company profile."""
    return CompanyProfile(
        company_name="Acme Metals",
        contact_person="Jane Doe",
        contact_phone="555-0100",
        contact_email="jane@acme.example",
    )


@pytest.fixture
def manager(
    db,
    activation_repository,
    user_repository,
    metal_type_repository,
    password_hasher,
    policy,
    clock,
):
    """Fixture for an ActivationManager in pre-provisioned mode."""
    return ActivationManager(
        activation_repository=activation_repository,
        user_repository=user_repository,
        metal_type_repository=metal_type_repository,
        password_hasher=password_hasher,
        policy=policy,
        clock=clock,
    )


@pytest.fixture
def self_service_manager(
    db,
    activation_repository,
    user_repository,
    metal_type_repository,
    password_hasher,
    self_service_policy,
    clock,
):
    """Fixture for an ActivationManager in self-service mode."""
    return ActivationManager(
        activation_repository=activation_repository,
        user_repository=user_repository,
        metal_type_repository=metal_type_repository,
        password_hasher=password_hasher,
        policy=self_service_policy,
        clock=clock,
    )


@pytest.fixture
def provisioned_code(manager, company):
    """Fixture for a pre-provisioned activation code saved in database."""
    result = manager.create_activation(company)
    assert result.success, result.message
    return result.activation_code


@pytest.fixture
def unclaimed_code(self_service_manager, company):
    """Fixture for an unclaimed self-service activation code saved in database."""
    result = self_service_manager.create_activation(company)
    assert result.success, result.message
    return result.activation_code


@pytest.fixture
def sample_activation(clock):
    """Fixture for an unsaved active Activation entity."""
    return Activation.create_provisioned(
        activation_code="GRC-TEST-0001",
        company_name="Acme Metals",
        expires_at=clock() + timedelta(days=365),
        max_users=3,
        now=clock(),
    )
