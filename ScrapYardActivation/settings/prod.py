"""
Production settings for ScrapYardActivation.
"""

import os

from .base import *  # noqa: F403, F401
from .logging import get_logging_config

DEBUG = False

# Secret key from environment
SECRET_KEY = os.environ.get("SECRET_KEY", SECRET_KEY)  # noqa: F405

# Remote verification only over TLS in production
BACKUP_SERVER["URL"] = os.environ.get(  # noqa: F405
    "BACKUP_SERVER_URL", "https://backup-server-1378.azurewebsites.net"
)

# Logging in production
LOGGING = get_logging_config(
    "production",
    log_dir=os.environ.get("SCRAPYARD_LOG_DIR", str(DATA_DIR / "logs")),  # noqa: F405
)
