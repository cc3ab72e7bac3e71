"""Diff routes for the Git DSL API."""

import logging
from typing import Any, Dict

from fastapi import APIRouter

from ..models import FileDiffRequest, SnapshotRequest
from ..services import DiffService

router = APIRouter(tags=["diff"])

logger = logging.getLogger(__name__)

diff_service = DiffService()


@router.post("/snapshot")
async def create_snapshot(request: SnapshotRequest) -> Dict[str, Any]:
    """List modified, created and deleted files plus commits."""
    logger.info(
        "Received snapshot request",
        extra={"repo": request.repo_path, "base": request.base_sha, "head": request.head_sha},
    )
    return await diff_service.process_snapshot_request(
        repo_path=request.repo_path,
        base_sha=request.base_sha,
        head_sha=request.head_sha,
        context_lines=request.context_lines,
        find_renames_threshold=request.find_renames_threshold,
    )


@router.post("/diff/file")
async def create_file_diff(request: FileDiffRequest) -> Dict[str, Any]:
    """Return one diff view for one file between two revisions."""
    logger.info(
        "Received file diff request",
        extra={
            "repo": request.repo_path,
            "file": request.filename,
            "view": request.view,
        },
    )
    result = await diff_service.process_file_request(
        repo_path=request.repo_path,
        base_sha=request.base_sha,
        head_sha=request.head_sha,
        filename=request.filename,
        view=request.view,
        line_separator=request.line_separator,
        context_lines=request.context_lines,
        find_renames_threshold=request.find_renames_threshold,
    )
    logger.info(
        "File diff request completed",
        extra={"file": request.filename, "ok": result.get("ok")},
    )
    return result
