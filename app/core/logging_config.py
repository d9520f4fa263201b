"""Logging setup for the API process.

Call ``setup_logging()`` once at startup.  Modules keep using
``logging.getLogger(__name__)``; every logger under the ``app`` package
inherits the handlers configured here.  When ``settings.log_dir`` is set, a
rotating file handler is added next to the console handler.
"""

import logging
import logging.handlers
import os

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
APP_LOGGER_NAME = "app"

_configured = False


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure the application logger tree (idempotent)."""
    global _configured

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(level or settings.log_level)

    if _configured:
        return app_logger

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    app_logger.addHandler(console)

    if settings.log_dir:
        os.makedirs(settings.log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            os.path.join(settings.log_dir, "campusdesk.log"),
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        app_logger.addHandler(file_handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    _configured = True
    return app_logger
