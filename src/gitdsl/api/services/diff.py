"""Service layer for Git DSL API."""

import logging
from typing import Any, Dict, Optional

from ...config import SessionConfig
from ...errors import GitDSLError
from ...serialize import DSLSerializer
from ...settings import get_default_repo_path, get_line_separator
from ...vcs import open_local_session


logger = logging.getLogger(__name__)


class DiffService:
    """Service class that opens sessions and renders envelopes."""

    def __init__(self) -> None:
        self.serializer = DSLSerializer()

    async def process_snapshot_request(
        self,
        repo_path: Optional[str],
        base_sha: str,
        head_sha: str,
        context_lines: int = 3,
        find_renames_threshold: int = 90,
    ) -> Dict[str, Any]:
        """Return the changed file sets and commits between two revisions."""
        logger.info(
            "Processing snapshot request",
            extra={"repo": repo_path, "base": base_sha, "head": head_sha},
        )

        async def handler(config: SessionConfig) -> Dict[str, Any]:
            dsl = await open_local_session(config.repo, config)
            return self.serializer.serialize_snapshot(dsl.snapshot)

        return await self._run(
            handler,
            repo_path=repo_path,
            base_sha=base_sha,
            head_sha=head_sha,
            context_lines=context_lines,
            find_renames_threshold=find_renames_threshold,
        )

    async def process_file_request(
        self,
        repo_path: Optional[str],
        base_sha: str,
        head_sha: str,
        filename: str,
        view: str,
        line_separator: Optional[str] = None,
        context_lines: int = 3,
        find_renames_threshold: int = 90,
    ) -> Dict[str, Any]:
        """Return one diff view of one file."""
        logger.info(
            "Processing file diff request",
            extra={"repo": repo_path, "file": filename, "view": view},
        )

        async def handler(config: SessionConfig) -> Dict[str, Any]:
            dsl = await open_local_session(config.repo, config)
            result = await dsl.view_for_file(filename, view)
            return {
                "file": filename,
                "status": dsl.snapshot.classify(filename),
                "view": view,
                "result": self.serializer.serialize_view(view, result),
            }

        return await self._run(
            handler,
            repo_path=repo_path,
            base_sha=base_sha,
            head_sha=head_sha,
            line_separator=line_separator,
            context_lines=context_lines,
            find_renames_threshold=find_renames_threshold,
        )

    async def _run(self, handler, repo_path: Optional[str], **config_kwargs) -> Dict[str, Any]:
        """Build the session config, run ``handler`` and wrap the outcome."""
        repo = repo_path or get_default_repo_path()
        try:
            if not repo:
                raise ValueError("repo_path is required when GITDSL_REPO_PATH is not set")
            if config_kwargs.get("line_separator") is None:
                config_kwargs["line_separator"] = get_line_separator()
            config = SessionConfig(repo=repo, **config_kwargs)
            payload = self.serializer.attach_provenance(await handler(config), config)
            logger.info("Request succeeded", extra={"repo": repo})
            return self.serializer.create_success_envelope(payload)

        except GitDSLError as exc:
            logger.warning(
                "Known git DSL error",
                extra={"repo": repo, "code": exc.code},
            )
            return self.serializer.create_error_envelope(exc.code, exc.message, exc.details)

        except ValueError as exc:
            logger.warning("Invalid request", extra={"repo": repo, "reason": str(exc)})
            return self.serializer.create_error_envelope("INVALID_REQUEST", str(exc))

        except Exception as exc:  # pragma: no cover
            logger.exception("Unexpected error during diff processing", extra={"repo": repo})
            return self.serializer.create_error_envelope(
                "INTERNAL_ERROR",
                f"Internal error: {str(exc)}",
                {"exception_type": type(exc).__name__},
            )
