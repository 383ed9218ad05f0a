"""
Test settings for ScrapYardActivation.
"""

from .base import *  # noqa: F403, F401

DEBUG = False

# Use in-memory SQLite for faster tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Password hashers for faster tests; PBKDF2 stays available for verification
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
    "django.contrib.auth.hashers.PBKDF2PasswordHasher",
]

# Never reach a real backup server from tests
BACKUP_SERVER = {
    "URL": "",
    "TIMEOUT_SECONDS": 10,
    "CONNECTIVITY_RETRIES": 2,
}

# Disable logging during tests
LOGGING_CONFIG = None
