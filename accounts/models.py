from accounts.infrastructure.models import User  # noqa: F401
