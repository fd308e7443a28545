# File: user_api/core/logging_setup.py

"""
Logging for the API and the seed script.

Only the project's own loggers are configured; the root logger and
whatever the server (uvicorn) installed are left alone.
"""

import logging
import logging.config

APP_LOGGERS = ("user_api", "seed_users")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level_name: str = "INFO") -> None:
    level = level_name.upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "concise": {"format": LOG_FORMAT},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "concise",
                },
            },
            "loggers": {
                name: {"handlers": ["console"], "level": level, "propagate": False}
                for name in APP_LOGGERS
            },
        }
    )
