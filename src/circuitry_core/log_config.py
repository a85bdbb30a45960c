# --- src/circuitry_core/log_config.py ---
import logging
import os
import sys
from typing import Optional, TextIO, Union

#: Environment variable that overrides the default log level (e.g. "DEBUG").
LOG_LEVEL_ENV_VAR = "CIRCUITRY_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] [%(name)s] %(message)s"


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV_VAR, logging.INFO)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        # getLevelName returns "Level X" for unknown names
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def setup_logging(level: Union[int, str, None] = None, stream: Optional[TextIO] = None):
    """ Configures basic logging to stdout (or the given stream). """
    log_formatter = logging.Formatter(LOG_FORMAT)
    root_logger = logging.getLogger()

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(log_formatter)
    root_logger.setLevel(_resolve_level(level))
    root_logger.addHandler(console_handler)
    logging.debug("Logging configured.")
