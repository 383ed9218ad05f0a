"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ActivationException(DomainException):
    """Base exception for activation-related errors."""

    pass


class ActivationNotFoundError(ActivationException):
    """Raised when an activation code is not found."""

    def __init__(self, message: str = "Activation code does not exist"):
        super().__init__(message, code="ACTIVATION_NOT_FOUND")


class ActivationAlreadyActivatedError(ActivationException):
    """Raised when a self-service code is claimed a second time."""

    def __init__(self, message: str = "This activation code has already been used"):
        super().__init__(message, code="ACTIVATION_ALREADY_ACTIVATED")


class ActivationNotActivatedError(ActivationException):
    """Raised when a code has never been activated."""

    def __init__(self, message: str = "Account not activated"):
        super().__init__(message, code="ACTIVATION_NOT_ACTIVATED")


class ActivationDisabledError(ActivationException):
    """Raised when an activation has been disabled."""

    def __init__(
        self, message: str = "Activation has been disabled, please contact supplier"
    ):
        super().__init__(message, code="ACTIVATION_DISABLED")


class ActivationExpiredError(ActivationException):
    """Raised when an activation has expired."""

    def __init__(
        self, message: str = "Activation has expired, please contact supplier for renewal"
    ):
        super().__init__(message, code="ACTIVATION_EXPIRED")


class DuplicateActivationCodeError(ActivationException):
    """Raised when a generated activation code collides with an existing one."""

    def __init__(self, message: str = "Activation code already exists"):
        super().__init__(message, code="DUPLICATE_ACTIVATION_CODE")


class SeatLimitExceededError(ActivationException):
    """Raised when an activation has no free user seats."""

    def __init__(self, message: str = "User limit reached"):
        super().__init__(message, code="SEAT_LIMIT_EXCEEDED")


class ProvisioningError(ActivationException):
    """Raised when default data cannot be provisioned for an activation."""

    def __init__(self, message: str = "Failed to provision default data"):
        super().__init__(message, code="PROVISIONING_FAILED")


class UserException(DomainException):
    """Base exception for user-related errors."""

    pass


class InvalidCredentialsError(UserException):
    """Raised when a username/password pair does not match."""

    def __init__(self, message: str = "Invalid username or password"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class UserDisabledError(UserException):
    """Raised when a disabled user tries to sign in."""

    def __init__(self, message: str = "User has been disabled"):
        super().__init__(message, code="USER_DISABLED")


class UserNotFoundError(UserException):
    """Raised when a user is not found for administrative operations."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message, code="USER_NOT_FOUND")


class UsernameTakenError(UserException):
    """Raised when a username already exists under an activation."""

    def __init__(self, message: str = "Username already exists under this activation code"):
        super().__init__(message, code="USERNAME_TAKEN")
