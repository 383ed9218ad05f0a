"""
ActivationManager - application service for the activation lifecycle.

Coordinates activation codes, default-data provisioning, users,
authentication and renewal. Every public operation returns a DTO;
domain exceptions are raised internally and converted at this boundary.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, ContextManager, List, Optional, TypeVar

from accounts.domain.password_hasher import PasswordHasher
from accounts.domain.user import User
from accounts.ports.user_repository import UserRepository
from activations.application.commands.create_activation import CompanyProfile
from activations.application.dto.activation_dto import (
    ActivationDTO,
    ActivationResultDTO,
    ActivationStatusDTO,
    AuthenticationResultDTO,
    CreateUserResultDTO,
    OperationResultDTO,
    RenewalResultDTO,
    UserDTO,
    UserListDTO,
    ValidationResultDTO,
)
from activations.domain.activation import Activation
from activations.domain.policies import ActivationPolicy, FixedTermPolicy
from activations.domain.services import ActivationCodeGenerator, SeatManager
from activations.infrastructure.remote_license_validator import RemoteLicenseValidator
from activations.ports.activation_repository import ActivationRepository
from catalog.domain.metal_type import build_default_metal_types
from catalog.ports.metal_type_repository import MetalTypeRepository
from core import metrics
from core.domain.exceptions import (
    ActivationAlreadyActivatedError,
    ActivationDisabledError,
    ActivationExpiredError,
    ActivationNotActivatedError,
    ActivationNotFoundError,
    DomainException,
    DuplicateActivationCodeError,
    InvalidCredentialsError,
    UserDisabledError,
    UserNotFoundError,
    UsernameTakenError,
)
from core.domain.value_objects import ProvisioningMode, UserRole, Username
from core.infrastructure.database import atomic_transaction

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_CODE_ATTEMPTS = 5


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ActivationManager:
    """
    Application service for activation codes and their users.

    Repositories, the password hasher, the policy and the optional
    backup-server client are injected; nothing here holds a global
    store handle.
    """

    def __init__(
        self,
        activation_repository: ActivationRepository,
        user_repository: UserRepository,
        metal_type_repository: MetalTypeRepository,
        password_hasher: Optional[PasswordHasher] = None,
        policy: Optional[ActivationPolicy] = None,
        remote_validator: Optional[RemoteLicenseValidator] = None,
        transaction: Callable[[], ContextManager] = atomic_transaction,
        code_generator: Optional[ActivationCodeGenerator] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the manager.

        Args:
            activation_repository: Activation persistence
            user_repository: User persistence
            metal_type_repository: Reference data persistence
            password_hasher: Hasher (Django-configured default if not provided)
            policy: Activation policy (read from settings if not provided)
            remote_validator: Optional backup server client
            transaction: Factory of unit-of-work context managers
            code_generator: Activation code generator
            clock: Returns the current aware datetime
        """
        self.activation_repository = activation_repository
        self.user_repository = user_repository
        self.metal_type_repository = metal_type_repository
        self.password_hasher = password_hasher or PasswordHasher()
        self.policy = policy or ActivationPolicy.from_settings()
        self.remote_validator = remote_validator
        self._transaction = transaction
        self.code_generator = code_generator or ActivationCodeGenerator(self.policy.code_prefix)
        self.seat_manager = SeatManager(
            user_repository, count_disabled_users=self.policy.count_disabled_users_as_seats
        )
        self._clock = clock or _utcnow

    @classmethod
    def from_settings(cls) -> "ActivationManager":
        """Build a manager wired to the Django repositories and settings."""
        from accounts.infrastructure.repositories.django_user_repository import (
            DjangoUserRepository,
        )
        from activations.infrastructure.repositories.django_activation_repository import (
            DjangoActivationRepository,
        )
        from catalog.infrastructure.repositories.django_metal_type_repository import (
            DjangoMetalTypeRepository,
        )

        remote_validator = RemoteLicenseValidator.from_settings()
        return cls(
            activation_repository=DjangoActivationRepository(),
            user_repository=DjangoUserRepository(),
            metal_type_repository=DjangoMetalTypeRepository(),
            remote_validator=remote_validator if remote_validator.is_configured else None,
        )

    @property
    def has_remote(self) -> bool:
        return self.remote_validator is not None and self.remote_validator.is_configured

    def _guard(self, operation: str, action: Callable[[], T], failure: Callable[[str, str], T]) -> T:
        """Run ``action`` and turn any exception into ``failure(message, code)``."""
        try:
            return action()
        except DomainException as e:
            logger.info(f"{operation} rejected: {e.code}")
            return failure(e.message, e.code)
        except ValueError as e:
            logger.info(f"{operation} rejected: {e}")
            return failure(str(e), "VALIDATION_ERROR")
        except Exception:
            logger.error(f"Unexpected error during {operation}", exc_info=True)
            return failure(f"{operation} failed due to an internal error", "INTERNAL_ERROR")

    def _find(self, activation_code: str) -> Activation:
        activation = self.activation_repository.find_by_code(activation_code)
        if activation is None:
            raise ActivationNotFoundError()
        return activation

    def _ensure_usable(self, activation: Activation, now: datetime) -> None:
        """
        Check that an activation may be used to sign in.

        Raises:
            ActivationNotActivatedError: Never claimed
            ActivationDisabledError: Claimed, then disabled
            ActivationExpiredError: Past its expiration
        """
        if not activation.is_active:
            if activation.activated_at is None:
                raise ActivationNotActivatedError()
            raise ActivationDisabledError()
        if activation.is_expired(now):
            raise ActivationExpiredError()

    def _provision_defaults(
        self, activation: Activation, admin_username: str, admin_password_hash: str
    ) -> User:
        """Create the first admin and the default price list. Runs inside a transaction."""
        admin = User.create(
            activation_id=activation.id,
            username=admin_username,
            password_hash=admin_password_hash,
            role=UserRole.ADMIN,
        )
        self.user_repository.add(admin)
        self.metal_type_repository.add_many(build_default_metal_types(activation.id))
        return admin

    def generate_code(self) -> str:
        """Generate a new activation code without storing it."""
        return self.code_generator.generate()

    def create_activation(
        self,
        profile: CompanyProfile,
        duration_months: Optional[int] = None,
        max_users: Optional[int] = None,
        expires_at: Optional[datetime] = None,
    ) -> ActivationResultDTO:
        """
        Issue a new activation code for a company.

        Pre-provisioned codes are active at once, with the default admin
        and the default price list created in the same transaction.
        Self-service codes are stored unclaimed; ``expires_at`` then acts
        as a deadline for claiming.

        Args:
            profile: Company details
            duration_months: Term in months for pre-provisioned codes
                (policy term if not provided)
            max_users: Seat limit (policy default if not provided)
            expires_at: Explicit end date, overrides ``duration_months``

        Returns:
            ActivationResultDTO with the new code
        """
        return self._guard(
            "Create activation",
            lambda: self._create_activation(profile, duration_months, max_users, expires_at),
            lambda message, code: ActivationResultDTO(
                success=False, message=message, error_code=code
            ),
        )

    def _create_activation(
        self,
        profile: CompanyProfile,
        duration_months: Optional[int],
        max_users: Optional[int],
        expires_at: Optional[datetime],
    ) -> ActivationResultDTO:
        now = self._clock()
        max_users = self.policy.default_max_users if max_users is None else max_users
        if max_users < 1:
            raise ValueError("Max users must be at least 1")
        if expires_at is not None and expires_at <= now:
            raise ValueError("Expiration date must be in the future")

        pre_provisioned = self.policy.provisioning == ProvisioningMode.PRE_PROVISIONED
        admin_hash = None
        if pre_provisioned:
            if expires_at is None:
                expiration = (
                    FixedTermPolicy(duration_months)
                    if duration_months is not None
                    else self.policy.expiration
                )
                expires_at = expiration.expires_at(now)
            admin_hash = self.password_hasher.hash(self.policy.default_admin_password)

        for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
            code = self.code_generator.generate()
            if pre_provisioned:
                activation = Activation.create_provisioned(
                    activation_code=code,
                    company_name=profile.company_name,
                    expires_at=expires_at,
                    max_users=max_users,
                    contact_person=profile.contact_person,
                    contact_phone=profile.contact_phone,
                    contact_email=profile.contact_email,
                    now=now,
                )
            else:
                activation = Activation.create_unclaimed(
                    activation_code=code,
                    company_name=profile.company_name,
                    max_users=max_users,
                    expires_at=expires_at,
                    contact_person=profile.contact_person,
                    contact_phone=profile.contact_phone,
                    contact_email=profile.contact_email,
                    now=now,
                )

            try:
                with self._transaction():
                    self.activation_repository.add(activation)
                    if pre_provisioned:
                        self._provision_defaults(
                            activation, self.policy.default_admin_username, admin_hash
                        )
            except DuplicateActivationCodeError:
                logger.warning(
                    f"Activation code collision on attempt {attempt}/{MAX_CODE_ATTEMPTS}, regenerating"
                )
                continue

            metrics.activations_created_total.labels(mode=self.policy.provisioning.value).inc()
            logger.info(
                f"Activation {code} created for {profile.company_name} "
                f"({self.policy.provisioning.value}, {max_users} seats)"
            )
            return ActivationResultDTO(
                success=True,
                message="Activation code created",
                activation_code=code,
                expires_at=activation.expires_at,
            )

        raise DuplicateActivationCodeError("Could not generate a unique activation code")

    def activate_by_code(
        self, activation_code: str, username: str, password: str
    ) -> ActivationResultDTO:
        """
        Claim a self-service activation code.

        Sets the activation time and the policy expiration, then creates
        the admin user with the caller's password and seeds the default
        price list, all in one transaction. A code can be claimed once.

        Returns:
            ActivationResultDTO
        """
        return self._guard(
            "Activate by code",
            lambda: self._activate_by_code(activation_code, username, password),
            lambda message, code: ActivationResultDTO(
                success=False, message=message, error_code=code
            ),
        )

    def _activate_by_code(
        self, activation_code: str, username: str, password: str
    ) -> ActivationResultDTO:
        Username(username)
        if not password:
            raise ValueError("Password is required")

        activation = self._find(activation_code)
        now = self._clock()
        claimed = activation.claim(self.policy.expiration.expires_at(now), now)
        password_hash = self.password_hasher.hash(password)

        with self._transaction():
            if not self.activation_repository.claim(claimed):
                raise ActivationAlreadyActivatedError()
            self._provision_defaults(claimed, username, password_hash)

        metrics.activations_claimed_total.inc()
        logger.info(f"Activation {activation_code} claimed by {claimed.company_name}")
        return ActivationResultDTO(
            success=True,
            message="Activation successful",
            activation_code=claimed.code,
            expires_at=claimed.expires_at,
        )

    def validate(self, activation_code: str) -> ValidationResultDTO:
        """
        Check that a code exists, is active and has not expired, in that order.

        Read-only.
        """
        return self._guard(
            "Validate activation",
            lambda: self._validate(activation_code),
            lambda message, code: ValidationResultDTO(
                valid=False, reason=message, error_code=code
            ),
        )

    def _validate(self, activation_code: str) -> ValidationResultDTO:
        activation = self._find(activation_code)
        self._ensure_usable(activation, self._clock())
        return ValidationResultDTO(
            valid=True,
            reason="Activation is valid",
            activation=ActivationDTO.from_entity(activation),
        )

    def check_status(self, activation_code: str) -> ActivationStatusDTO:
        """
        Report expiration status and days remaining for a code.

        ``days_left`` is rounded up to whole days and never negative. A code
        that does not exist is reported as expired.
        """
        return self._guard(
            "Check status",
            lambda: self._check_status(activation_code),
            lambda message, code: ActivationStatusDTO(
                expired=code == "ACTIVATION_NOT_FOUND",
                days_left=0,
                is_active=False,
                message=message,
            ),
        )

    def _check_status(self, activation_code: str) -> ActivationStatusDTO:
        activation = self._find(activation_code)
        now = self._clock()
        expired = activation.is_expired(now)
        days_left = activation.days_left(now) or 0

        if not activation.is_active:
            if activation.activated_at is None:
                message = ActivationNotActivatedError().message
            else:
                message = ActivationDisabledError().message
        elif expired:
            message = "Activation has expired"
        elif activation.expires_at is None:
            message = "Activation is valid, no expiration date"
        else:
            message = f"Activation is valid, {days_left} days remaining"

        return ActivationStatusDTO(
            expired=expired,
            days_left=0 if expired else days_left,
            is_active=activation.is_active,
            message=message,
            company_name=activation.company_name,
            expires_at=activation.expires_at,
        )

    def authenticate(
        self, activation_code: str, username: str, password: str
    ) -> AuthenticationResultDTO:
        """
        Sign a user in under an activation code.

        Unknown usernames and wrong passwords get the same message. On
        success the last-login time is recorded and outdated password
        hashes are upgraded; neither side effect can fail the login.
        """
        result = self._guard(
            "Authenticate",
            lambda: self._authenticate(activation_code, username, password),
            lambda message, code: AuthenticationResultDTO(
                success=False, reason=message, error_code=code
            ),
        )
        metrics.authentication_attempts_total.labels(
            outcome="success" if result.success else "failure"
        ).inc()
        return result

    def _authenticate(
        self, activation_code: str, username: str, password: str
    ) -> AuthenticationResultDTO:
        activation = self._find(activation_code)
        now = self._clock()
        self._ensure_usable(activation, now)

        user = self.user_repository.find_by_activation_and_username(activation.id, username)
        if user is None:
            raise InvalidCredentialsError()
        if not user.is_active:
            raise UserDisabledError()
        if not self.password_hasher.verify(password, user.password_hash):
            raise InvalidCredentialsError()

        if self.has_remote:
            self._consult_remote(activation)

        try:
            self.user_repository.update_last_login(user.id, now)
        except Exception:
            logger.warning(f"Failed to record last login for user {user.id}", exc_info=True)

        if self.password_hasher.needs_rehash(user.password_hash):
            try:
                new_hash = self.password_hasher.hash(password)
                self.user_repository.update_password_hash(user.id, new_hash)
                user = user.with_password_hash(new_hash)
                logger.info(f"Upgraded password hash for user {user.id}")
            except Exception:
                logger.warning(f"Failed to upgrade password hash for user {user.id}", exc_info=True)

        user = user.record_login(now)
        logger.info(f"User {username} signed in under {activation_code}")
        return AuthenticationResultDTO(
            success=True,
            reason="Login successful",
            user=UserDTO.from_entity(user),
            activation=ActivationDTO.from_entity(activation),
        )

    def _consult_remote(self, activation: Activation) -> None:
        """
        Cross-check an activation with the backup server.

        Raises:
            ActivationExpiredError: If the server reports expiry and the
                policy makes the server authoritative
        """
        remote = self.remote_validator.validate_remote(activation.code)
        if not remote.success:
            logger.info(f"Backup server check skipped for {activation.code}: {remote.message}")
            return
        if remote.expired:
            if self.policy.remote_authoritative:
                raise ActivationExpiredError()
            logger.warning(
                f"Backup server reports {activation.code} expired; local verdict kept"
            )

    def authenticate_by_username(self, username: str, password: str) -> AuthenticationResultDTO:
        """
        Sign a user in without an activation code.

        Looks the username up among local activations, preferring usable
        ones, and falls back to the backup server when it is unknown locally.
        When no candidate signs in, the first candidate's failure is returned.
        """
        result = self._guard(
            "Authenticate by username",
            lambda: self._candidate_codes(username),
            lambda message, code: AuthenticationResultDTO(
                success=False, reason=message, error_code=code
            ),
        )
        if isinstance(result, AuthenticationResultDTO):
            return result
        if not result:
            metrics.authentication_attempts_total.labels(outcome="failure").inc()
            error = InvalidCredentialsError()
            return AuthenticationResultDTO(
                success=False, reason=error.message, error_code=error.code
            )

        first_failure = None
        for activation_code in result:
            outcome = self._guard(
                "Authenticate",
                lambda: self._authenticate(activation_code, username, password),
                lambda message, code: AuthenticationResultDTO(
                    success=False, reason=message, error_code=code
                ),
            )
            if outcome.success:
                metrics.authentication_attempts_total.labels(outcome="success").inc()
                return outcome
            first_failure = first_failure or outcome

        metrics.authentication_attempts_total.labels(outcome="failure").inc()
        return first_failure

    def _candidate_codes(self, username: str) -> List[str]:
        now = self._clock()
        usable, others = [], []
        for user in self.user_repository.find_by_username(username):
            activation = self.activation_repository.find_by_id(user.activation_id)
            if activation is None:
                continue
            if activation.is_active and not activation.is_expired(now):
                usable.append(activation.code)
            else:
                others.append(activation.code)
        if usable or others:
            return usable + others

        if self.has_remote:
            lookup = self.remote_validator.lookup_user_activation(username)
            if lookup.success and self.activation_repository.find_by_code(lookup.activation_code):
                return [lookup.activation_code]
            logger.info(f"Backup server lookup for unknown user failed: {lookup.message}")
        return []

    def create_user(
        self,
        activation_code: str,
        username: str,
        password: str,
        role: str = "operator",
    ) -> CreateUserResultDTO:
        """
        Add a user to an activation, bounded by its seat limit.

        Seats are counted fresh inside the transaction and recounted
        after the insert; an overflow rolls the insert back.
        """
        return self._guard(
            "Create user",
            lambda: self._create_user(activation_code, username, password, role),
            lambda message, code: CreateUserResultDTO(
                success=False, message=message, error_code=code
            ),
        )

    def _create_user(
        self, activation_code: str, username: str, password: str, role: str
    ) -> CreateUserResultDTO:
        try:
            user_role = UserRole(role)
        except ValueError:
            raise ValueError(f"Invalid role: {role}") from None
        Username(username)
        password_hash = self.password_hasher.hash(password)

        with self._transaction():
            activation = self.activation_repository.lock_for_update(activation_code)
            if activation is None:
                raise ActivationNotFoundError()
            if not activation.is_active:
                if activation.activated_at is None:
                    raise ActivationNotActivatedError()
                raise ActivationDisabledError()

            self.seat_manager.ensure_seat_available(activation)
            if self.user_repository.find_by_activation_and_username(activation.id, username):
                raise UsernameTakenError()

            user = User.create(
                activation_id=activation.id,
                username=username,
                password_hash=password_hash,
                role=user_role,
            )
            self.user_repository.add(user)
            self.seat_manager.ensure_within_limit(activation)

        metrics.users_created_total.labels(role=user_role.value).inc()
        logger.info(f"User {username} ({user_role.value}) created under {activation_code}")
        return CreateUserResultDTO(
            success=True, message="User created", user=UserDTO.from_entity(user)
        )

    def disable_user(self, activation_code: str, username: str) -> OperationResultDTO:
        """Disable a user, freeing their seat. The row is kept."""
        return self._guard(
            "Disable user",
            lambda: self._disable_user(activation_code, username),
            lambda message, code: OperationResultDTO(
                success=False, message=message, error_code=code
            ),
        )

    def _disable_user(self, activation_code: str, username: str) -> OperationResultDTO:
        activation = self._find(activation_code)
        user = self.user_repository.find_by_activation_and_username(activation.id, username)
        if user is None:
            raise UserNotFoundError()
        self.user_repository.save(user.disable())
        logger.info(f"User {username} disabled under {activation_code}")
        return OperationResultDTO(success=True, message="User disabled")

    def change_password(
        self,
        activation_code: str,
        username: str,
        old_password: str,
        new_password: str,
    ) -> OperationResultDTO:
        """Change a user's password after verifying the current one."""
        return self._guard(
            "Change password",
            lambda: self._change_password(activation_code, username, old_password, new_password),
            lambda message, code: OperationResultDTO(
                success=False, message=message, error_code=code
            ),
        )

    def _change_password(
        self,
        activation_code: str,
        username: str,
        old_password: str,
        new_password: str,
    ) -> OperationResultDTO:
        activation = self._find(activation_code)
        user = self.user_repository.find_by_activation_and_username(activation.id, username)
        if user is None or not self.password_hasher.verify(old_password, user.password_hash):
            raise InvalidCredentialsError()
        if not user.is_active:
            raise UserDisabledError()
        self.user_repository.update_password_hash(
            user.id, self.password_hasher.hash(new_password)
        )
        logger.info(f"Password changed for user {user.id}")
        return OperationResultDTO(success=True, message="Password changed")

    def renew(
        self,
        activation_code: str,
        extra_months: int,
        username: Optional[str] = None,
    ) -> RenewalResultDTO:
        """
        Extend an activation by whole months.

        The extension stacks on the current expiration. The renewal is
        reported to the backup server when one is configured; the report
        can never undo or fail the local renewal.

        Args:
            activation_code: Activation code
            extra_months: Months to add
            username: Optional user performing the renewal, for the report

        Returns:
            RenewalResultDTO with the new expiration
        """
        return self._guard(
            "Renew activation",
            lambda: self._renew(activation_code, extra_months, username),
            lambda message, code: RenewalResultDTO(
                success=False, message=message, error_code=code
            ),
        )

    def _renew(
        self, activation_code: str, extra_months: int, username: Optional[str]
    ) -> RenewalResultDTO:
        now = self._clock()
        with self._transaction():
            activation = self.activation_repository.lock_for_update(activation_code)
            if activation is None:
                raise ActivationNotFoundError()
            if not activation.is_claimed:
                raise ActivationNotActivatedError()
            renewed = activation.renew(extra_months, now)
            self.activation_repository.save(renewed)

        metrics.activations_renewed_total.inc()
        logger.info(f"Activation {activation_code} renewed until {renewed.expires_at.isoformat()}")

        remote_message = None
        if self.has_remote:
            try:
                report = self.remote_validator.report_renewal(
                    activation_code, renewed.expires_at, username
                )
                remote_message = report.message
            except Exception:
                logger.warning(f"Renewal report for {activation_code} failed", exc_info=True)
                remote_message = "Renewal completed locally (server update failed)"

        return RenewalResultDTO(
            success=True,
            message=f"Activation renewed until {renewed.expires_at.date().isoformat()}",
            expires_at=renewed.expires_at,
            remote_message=remote_message,
        )

    def disable(self, activation_code: str) -> OperationResultDTO:
        """Disable an activation. Users are left untouched and nothing is deleted."""
        return self._guard(
            "Disable activation",
            lambda: self._disable(activation_code),
            lambda message, code: OperationResultDTO(
                success=False, message=message, error_code=code
            ),
        )

    def _disable(self, activation_code: str) -> OperationResultDTO:
        activation = self._find(activation_code)
        self.activation_repository.save(activation.disable(self._clock()))
        metrics.activations_disabled_total.inc()
        logger.info(f"Activation {activation_code} disabled")
        return OperationResultDTO(success=True, message="Activation disabled")

    def get_activation(self, activation_code: str) -> Optional[ActivationDTO]:
        """Look an activation up by code."""
        return self._guard(
            "Get activation",
            lambda: ActivationDTO.from_entity(self._find(activation_code)),
            lambda message, code: None,
        )

    def list_users(self, activation_code: str) -> UserListDTO:
        """List the users of an activation with current seat usage."""
        return self._guard(
            "List users",
            lambda: self._list_users(activation_code),
            lambda message, code: UserListDTO(success=False, message=message, error_code=code),
        )

    def _list_users(self, activation_code: str) -> UserListDTO:
        activation = self._find(activation_code)
        users = self.user_repository.find_by_activation(activation.id)
        return UserListDTO(
            success=True,
            message=f"{len(users)} user(s)",
            users=[UserDTO.from_entity(user) for user in users],
            seats_used=self.seat_manager.count_used_seats(activation.id),
            seats_remaining=self.seat_manager.seats_remaining(activation),
            max_users=activation.max_users,
        )
