"""Meta endpoints for the Git DSL API."""

import logging
import re
import subprocess
from importlib import metadata
from typing import Dict, Optional

from fastapi import APIRouter

from .. import __version__
from ...dsl import VIEWS
from ...settings import get_default_repo_path
from ...vcs import MIN_GIT_VERSION
from ..models import HealthResponse, VersionResponse

router = APIRouter(tags=["meta"])

logger = logging.getLogger(__name__)

# Distributions whose behaviour shapes the diff views
_LIBRARIES = ("unidiff", "json5", "jsonpointer")


def _get_git_version() -> Optional[str]:
    """Return the installed git version if available."""
    try:
        result = subprocess.run(
            ["git", "--version"],
            capture_output=True,
            text=True,
            timeout=5,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("git --version check failed", exc_info=exc)
        return None

    match = re.search(r"git version (\d+\.\d+(?:\.\d+)?)", result.stdout)
    if result.returncode != 0 or not match:
        return None
    return match.group(1)


def _git_supported(git_version: Optional[str]) -> bool:
    if not git_version:
        return False
    return tuple(int(x) for x in git_version.split(".")[:2]) >= MIN_GIT_VERSION


def _library_versions() -> Dict[str, Optional[str]]:
    versions: Dict[str, Optional[str]] = {}
    for name in _LIBRARIES:
        try:
            versions[name] = metadata.version(name)
        except metadata.PackageNotFoundError:
            versions[name] = None
    return versions


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Report whether local sessions can be opened."""
    git_version = _get_git_version()
    git_supported = _git_supported(git_version)
    logger.info(
        "Health check invoked",
        extra={"git_version": git_version, "git_supported": git_supported},
    )
    return HealthResponse(
        status="healthy" if git_supported else "degraded",
        version=__version__,
        git_version=git_version,
        git_supported=git_supported,
        default_repo_configured=get_default_repo_path() is not None,
    )


@router.get("/version", response_model=VersionResponse)
def version_info() -> VersionResponse:
    """Engine, git and library versions plus the diff views on offer."""
    git_version = _get_git_version()
    logger.info("Version endpoint invoked", extra={"git_version": git_version})
    return VersionResponse(
        version=__version__,
        api_version="v1",
        git_version=git_version,
        minimum_git_version=".".join(str(part) for part in MIN_GIT_VERSION),
        supported_views=list(VIEWS),
        libraries=_library_versions(),
    )


@router.get("/", include_in_schema=False)
def root() -> dict:
    """Root endpoint listing the diff endpoints and views."""
    logger.debug("Root endpoint served")
    return {
        "name": "Git DSL API",
        "version": __version__,
        "description": "Per-file text, structured and JSON diffs between two revisions",
        "views": list(VIEWS),
        "endpoints": {
            "snapshot": "POST /snapshot - Modified, created and deleted files plus commits",
            "file_diff": "POST /diff/file - One view (text, structured, patch, json-diff) of one file",
            "health": "GET /health - Git availability and default repository",
            "version": "GET /version - Engine, git and library versions",
            "docs": "GET /docs - API documentation",
        },
    }
