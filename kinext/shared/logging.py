"""Process logging setup (stdlib logging to stdout)."""

import logging
import sys

from kinext.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Per-request lines from the HTTP client would log every tenant database URL.
_QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging() -> None:
    """Configure the root logger once; DEBUG when settings.debug, INFO otherwise."""
    level = logging.DEBUG if get_settings().debug else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
