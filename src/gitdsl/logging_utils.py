"""Logging configuration for the Git DSL CLI and API."""

import logging
import os
from typing import Optional

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: Optional[str] = None, *, force: bool = False) -> None:
    """Configure root logging once.

    ``GITDSL_LOG_LEVEL`` takes precedence over ``LOG_LEVEL``. Pass
    ``force=True`` to replace handlers installed earlier, e.g. when the
    CLI is asked for verbose output after the API module configured logging.
    """
    if logging.getLogger().handlers and not force:
        return

    log_level = level or os.getenv("GITDSL_LOG_LEVEL") or os.getenv("LOG_LEVEL", "INFO")
    logging.basicConfig(level=log_level.upper(), format=_LOG_FORMAT, force=force)
