"""
Activation DTOs returned by the activation manager.

Result DTOs carry ``success``/``message``/``error_code`` so that callers
never have to handle exceptions.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from accounts.domain.user import User
from activations.domain.activation import Activation


@dataclass
class ActivationDTO:
    """DTO for activation information."""

    id: uuid.UUID
    activation_code: str
    company_name: str
    contact_person: Optional[str]
    contact_phone: Optional[str]
    contact_email: Optional[str]
    activated_at: Optional[datetime]
    expires_at: Optional[datetime]
    is_active: bool
    max_users: int

    @classmethod
    def from_entity(cls, activation: Activation) -> "ActivationDTO":
        return cls(
            id=activation.id,
            activation_code=activation.code,
            company_name=activation.company_name,
            contact_person=activation.contact_person,
            contact_phone=activation.contact_phone,
            contact_email=str(activation.contact_email) if activation.contact_email else None,
            activated_at=activation.activated_at,
            expires_at=activation.expires_at,
            is_active=activation.is_active,
            max_users=activation.max_users,
        )


@dataclass
class UserDTO:
    """DTO for user information. Never carries the password hash."""

    id: uuid.UUID
    activation_id: uuid.UUID
    username: str
    role: str
    is_active: bool
    last_login: Optional[datetime]
    created_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> "UserDTO":
        return cls(
            id=user.id,
            activation_id=user.activation_id,
            username=str(user.username),
            role=user.role.value,
            is_active=user.is_active,
            last_login=user.last_login,
            created_at=user.created_at,
        )


@dataclass
class OperationResultDTO:
    """DTO for the outcome of a state-changing operation."""

    success: bool
    message: str
    error_code: Optional[str] = None


@dataclass
class ActivationResultDTO(OperationResultDTO):
    """DTO for create and activate responses."""

    activation_code: Optional[str] = None
    expires_at: Optional[datetime] = None


@dataclass
class RenewalResultDTO(OperationResultDTO):
    """DTO for renewal response."""

    expires_at: Optional[datetime] = None
    remote_message: Optional[str] = None


@dataclass
class CreateUserResultDTO(OperationResultDTO):
    """DTO for create user response."""

    user: Optional[UserDTO] = None


@dataclass
class ValidationResultDTO:
    """DTO for activation validation."""

    valid: bool
    reason: str
    error_code: Optional[str] = None
    activation: Optional[ActivationDTO] = None


@dataclass
class ActivationStatusDTO:
    """DTO for activation status response."""

    expired: bool
    days_left: int
    is_active: bool
    message: str
    company_name: Optional[str] = None
    expires_at: Optional[datetime] = None


@dataclass
class AuthenticationResultDTO:
    """DTO for authentication response."""

    success: bool
    reason: str
    error_code: Optional[str] = None
    user: Optional[UserDTO] = None
    activation: Optional[ActivationDTO] = None


@dataclass
class UserListDTO:
    """DTO for the users of an activation."""

    success: bool
    message: str
    error_code: Optional[str] = None
    users: List[UserDTO] = field(default_factory=list)
    seats_used: int = 0
    seats_remaining: int = 0
    max_users: int = 0
