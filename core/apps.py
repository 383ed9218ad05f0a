"""
App configuration for the core app.
"""

import logging
from pathlib import Path

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class CoreConfig(AppConfig):
    """App configuration for core."""

    name = "core"
    verbose_name = "Scrap Yard Core"

    def ready(self):
        """Make sure the directory of the embedded database exists."""
        name = str(settings.DATABASES["default"].get("NAME") or "")
        if not name or name == ":memory:" or name.startswith("file:"):
            return

        directory = Path(name).parent
        if not directory.exists():
            directory.mkdir(parents=True, exist_ok=True)
            logger.info("Created data directory %s", directory)
