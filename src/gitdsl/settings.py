"""Application-wide settings and environment loading."""

import codecs
import logging
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()
logger.debug("Environment variables loaded from .env if present")


@lru_cache(maxsize=1)
def get_default_repo_path() -> Optional[str]:
    """Return the repository used when a request names none."""
    repo_path = os.getenv("GITDSL_REPO_PATH")
    if repo_path:
        logger.debug("Default repository configured", extra={"repo_path": repo_path})
        return repo_path

    logger.debug("Default repository not configured")
    return None


@lru_cache(maxsize=1)
def get_line_separator() -> str:
    """Return the separator joining text diff lines."""
    raw = os.getenv("GITDSL_LINE_SEPARATOR")
    if not raw:
        return os.linesep
    # Allow "\n" and "\r\n" written as escapes in .env files
    return codecs.decode(raw, "unicode_escape")
