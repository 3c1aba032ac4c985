"""Internal logging utilities."""

from __future__ import annotations

import logging

from otelsync.exceptions import MissingFieldError

# Package logger
logger = logging.getLogger("otelsync")

# Default to WARNING to avoid noise
logger.setLevel(logging.WARNING)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Set the package log level and attach a stream handler once.

    Unknown level names fall back to INFO with a warning.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            logger.warning("Unknown log level '%s', defaulting to INFO", level)
            resolved = logging.INFO
    else:
        resolved = level

    logger.setLevel(resolved)
    if not any(getattr(h, "_otelsync", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._otelsync = True  # type: ignore[attr-defined]
        logger.addHandler(handler)


def log_destination_skipped(
    destination_name: str, destination_type: str, reason: Exception
) -> None:
    """Log why a destination contributes nothing to the collector config.

    Missing fields are routine while a destination is being filled in and
    log at INFO; malformed values log at ERROR.
    """
    level = logging.INFO if isinstance(reason, MissingFieldError) else logging.ERROR
    logger.log(
        level,
        "Destination '%s' (%s) skipped, gateway will not be configured for it: %s",
        destination_name,
        destination_type,
        reason,
    )
