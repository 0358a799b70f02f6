"""
Logging setup for the web server and CLI.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging once.

    Args:
        level: Level name (DEBUG, INFO, ...). Defaults to INFO.
    """
    resolved = logging.getLevelName((level or "INFO").upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(level=resolved, format=LOG_FORMAT, stream=sys.stderr)
    logging.getLogger().setLevel(resolved)

    # urllib3 logs every request at DEBUG
    logging.getLogger("urllib3").setLevel(max(resolved, logging.WARNING))
