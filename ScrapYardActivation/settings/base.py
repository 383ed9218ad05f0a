"""
Base Django settings for ScrapYardActivation.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Directory holding the embedded database file
DATA_DIR = Path(os.environ.get("SCRAPYARD_DATA_DIR", BASE_DIR / "data"))

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "DJANGO_SECRET_KEY",
    "django-insecure-3m!k0v7#yq2w^s8r@c5x$e1n(z4p)u9h&a6j*t0l+b2d-f7g",
)

DEBUG = False

# Application definition
INSTALLED_APPS = [
    # Local apps
    "core.apps.CoreConfig",
    "activations",
    "accounts",
    "catalog",
]

# Database
# Single-file embedded store; one serialized connection per process.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("SCRAPYARD_DB_PATH", str(DATA_DIR / "scrapyard.sqlite3")),
        "OPTIONS": {
            "timeout": 20,
        },
    }
}

# Password hashing
# The first entry is used for new hashes; the rest are accepted on verify.
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.PBKDF2PasswordHasher",
    "django.contrib.auth.hashers.PBKDF2SHA1PasswordHasher",
]

# Internationalization
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Default primary key field type
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# Activation policy
ACTIVATION = {
    "CODE_PREFIX": "GRC",
    # "pre_provisioned" creates active codes with a default admin;
    # "self_service" creates unclaimed codes activated by the customer.
    "PROVISIONING": os.environ.get("SCRAPYARD_PROVISIONING", "pre_provisioned"),
    "TERM_MONTHS": 12,
    "DEFAULT_MAX_USERS": 3,
    "DEFAULT_ADMIN_USERNAME": "admin",
    # Known weak initial password; callers force a change on first login.
    "DEFAULT_ADMIN_PASSWORD": "admin123",
    "COUNT_DISABLED_USERS_AS_SEATS": False,
    "REMOTE_AUTHORITATIVE": False,
}

# Backup license server (optional)
BACKUP_SERVER = {
    "URL": os.environ.get("BACKUP_SERVER_URL", ""),
    "TIMEOUT_SECONDS": int(os.environ.get("BACKUP_SERVER_TIMEOUT", "10")),
    "CONNECTIVITY_RETRIES": 2,
}

# Observability
LOGGING = get_logging_config(
    os.environ.get("SCRAPYARD_ENV", "development"),
    log_level=os.environ.get("SCRAPYARD_LOG_LEVEL"),
)
