# --- src/eesim_core/log_config.py ---
import logging
import sys
from typing import Optional, TextIO, Union

LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] [%(name)s] %(message)s"


def setup_logging(level: Union[int, str] = logging.INFO, stream: Optional[TextIO] = None):
    """
    Configures root logging for the simulation core.

    Args:
        level: A logging level, either numeric or a name such as "DEBUG".
        stream: Target stream. Defaults to stdout.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()

    # Replace whatever handlers a previous call (or the host) installed.
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    # Registry construction in pint is noisy at DEBUG.
    logging.getLogger("pint").setLevel(max(level, logging.INFO))
    logging.info(f"Logging configured at level {logging.getLevelName(level)}.")
