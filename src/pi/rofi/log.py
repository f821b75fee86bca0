"""Debug logging setup.

Diagnostics are never written to stdout, which belongs to the launcher
protocol. With a verbosity above zero they are redirected to a log file.
"""

from __future__ import annotations

import logging

from pi.rofi.config import RofiConfig

LOGGER_NAME = "pi.rofi"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_BANNER = "\n---------------------------------------------------\n"


def configure_logging(config: RofiConfig) -> logging.Handler | None:
    """Send pi.rofi diagnostics to ``config.log_file`` when verbosity > 0.

    Returns the attached handler, or None when debugging is off or the
    log file cannot be opened.
    """
    if config.verbosity <= 0:
        return None

    try:
        handler = logging.FileHandler(config.log_file, mode="a", encoding="utf-8")
    except OSError:
        return None

    handler.stream.write(_BANNER + "\n")
    handler.stream.flush()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger(LOGGER_NAME)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return handler
