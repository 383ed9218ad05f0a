"""
Development settings for ScrapYardActivation.
"""

import os

from .base import *  # noqa: F403, F401

DEBUG = True

# Keep the development database next to the checkout unless overridden
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.environ.get("SCRAPYARD_DB_PATH", str(BASE_DIR / "db.sqlite3")),  # noqa: F405
    }
}

# Local backup server stub for development
BACKUP_SERVER["URL"] = os.environ.get("BACKUP_SERVER_URL", "http://127.0.0.1:8080")  # noqa: F405
