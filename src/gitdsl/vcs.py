"""Local git checkout as content, diff and snapshot provider."""

import asyncio
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Set, Tuple, Union

from .config import SessionConfig
from .dsl import GitDSL
from .errors import (
    GitCommandError,
    GitTimeoutError,
    GitVersionUnsupportedError,
    RepositoryNotFoundError,
    RevisionNotFoundError,
)
from .model import GitCommit, RepositorySnapshot

logger = logging.getLogger(__name__)

MIN_GIT_VERSION = (2, 30)

# Field and record separators for `git log --format`
_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = _FIELD_SEP.join(
    ["%H", "%P", "%an", "%ae", "%aI", "%cn", "%ce", "%cI", "%B"]
) + _RECORD_SEP


@dataclass
class GitResult:
    """Outcome of one git invocation."""

    returncode: int
    stdout: str
    stderr: str


@dataclass
class FileChange:
    """Represents a file change between two commits."""

    status: str  # A, M, D, R, C, T
    path_old: Optional[str]
    path_new: Optional[str]
    rename_score: Optional[int] = None

    @property
    def path(self) -> str:
        return self.path_new or self.path_old or ""


class LocalGitRepository:
    """Git operations against an existing local checkout.

    :meth:`get_file_contents`, :meth:`get_full_diff` and
    :meth:`load_snapshot` back a :class:`GitDSL` without a hosting platform.
    """

    def __init__(self, repo_path: Union[str, Path], config: SessionConfig):
        """Initialize with repository path and configuration."""
        self.repo_path = Path(repo_path)
        if not self.repo_path.is_dir():
            raise RepositoryNotFoundError(str(self.repo_path))
        self.config = config
        self._git_version: Optional[str] = None
        self._known_revisions: Set[str] = set()

    async def _run_git(self, args: List[str], check: bool = True) -> GitResult:
        """Run git command with proper environment and error handling."""
        # Enforce deterministic git behavior across platforms
        cmd = [
            "git",
            "-c",
            "core.autocrlf=false",
            "-c",
            "core.quotepath=false",
            "-c",
            "color.ui=false",
            "-c",
            "diff.noprefix=false",
            "-c",
            "diff.mnemonicPrefix=false",
        ] + args
        logger.debug("Running git", extra={"args": args, "repo_path": str(self.repo_path)})

        process = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=self.repo_path,
            env=self.config.git_env,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.config.git_timeout
            )
        except asyncio.TimeoutError as exc:
            process.kill()
            await process.wait()
            raise GitTimeoutError(f"git {args[0]}", self.config.git_timeout) from exc

        result = GitResult(
            returncode=process.returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )
        if check and result.returncode != 0:
            raise GitCommandError(args, result.returncode, result.stderr)
        return result

    async def validate_git_version(self) -> str:
        """Validate Git version meets minimum requirements."""
        if self._git_version:
            return self._git_version

        try:
            result = await self._run_git(["--version"])
        except (GitCommandError, OSError) as exc:
            raise GitVersionUnsupportedError("unavailable") from exc

        # Extract version number from "git version 2.34.1"
        match = re.search(r"git version (\d+\.\d+(?:\.\d+)?)", result.stdout)
        if not match:
            raise GitVersionUnsupportedError("unknown")

        version_str = match.group(1)
        version_parts = tuple(int(x) for x in version_str.split(".")[:2])
        if version_parts < MIN_GIT_VERSION:
            raise GitVersionUnsupportedError(version_str)

        self._git_version = version_str
        return version_str

    async def verify_revision(self, revision: str) -> None:
        """Ensure ``revision`` names a commit in the repository."""
        if revision in self._known_revisions:
            return
        result = await self._run_git(
            ["rev-parse", "--verify", "--quiet", f"{revision}^{{commit}}"], check=False
        )
        if result.returncode != 0:
            raise RevisionNotFoundError(revision, str(self.repo_path))
        self._known_revisions.add(revision)

    async def get_file_contents(self, path: str, repo: Optional[str], sha: str) -> str:
        """Return a file's content at ``sha``, or "" when it does not exist there.

        ``repo`` is accepted for interface compatibility; the checkout is
        fixed by ``repo_path``.
        """
        await self.verify_revision(sha)

        listing = await self._run_git(["ls-tree", sha, "--", path])
        # Expected: "<mode> <type> <object>\t<path>"
        meta = listing.stdout.strip().split("\t", 1)[0].split()
        if len(meta) < 2 or meta[1] != "blob":
            logger.debug("File absent at revision", extra={"path": path, "sha": sha})
            return ""

        result = await self._run_git(["show", f"{sha}:{path}"])
        return result.stdout

    async def get_full_diff(self, base: str, head: str) -> str:
        """Return the raw unified diff between two revisions."""
        await self.verify_revision(base)
        await self.verify_revision(head)

        result = await self._run_git(
            [
                "diff",
                "--no-color",
                "--no-ext-diff",
                f"--find-renames={self.config.find_renames_threshold}%",
                f"--unified={self.config.context_lines}",
                f"{base}..{head}",
            ]
        )
        return result.stdout

    async def get_file_changes(self, base: str, head: str) -> List[FileChange]:
        """Get list of file changes between commits with rename detection."""
        await self.verify_revision(base)
        await self.verify_revision(head)

        result = await self._run_git(
            [
                "diff",
                "--name-status",
                f"--find-renames={self.config.find_renames_threshold}%",
                "--no-color",
                f"{base}..{head}",
            ]
        )

        changes = []
        for line in result.stdout.strip().split("\n"):
            if not line:
                continue
            change = self._parse_name_status_line(line)
            if change:
                changes.append(change)

        # Sort changes deterministically
        changes.sort(key=lambda c: (c.path, c.status))
        return changes

    def _parse_name_status_line(self, line: str) -> Optional[FileChange]:
        """Parse a single line from git diff --name-status output."""
        parts = line.split("\t")
        if len(parts) < 2:
            return None

        status_part = parts[0]
        status = status_part[0]

        # Handle rename/copy with score
        rename_score = None
        if status in "RC" and len(status_part) > 1:
            score_match = re.search(r"(\d+)", status_part)
            if score_match:
                rename_score = int(score_match.group(1))

        if status in "RC":
            if len(parts) < 3:
                return None
            path_old, path_new = parts[1], parts[2]
        elif status == "D":
            path_old, path_new = parts[1], None
        elif status == "A":
            path_old, path_new = None, parts[1]
        else:
            path_old = path_new = parts[1]

        return FileChange(
            status=status,
            path_old=path_old,
            path_new=path_new,
            rename_score=rename_score,
        )

    async def get_commits(self, base: str, head: str) -> List[GitCommit]:
        """Commits reachable from ``head`` but not ``base``, oldest first."""
        await self.verify_revision(base)
        await self.verify_revision(head)

        result = await self._run_git(
            ["log", "--reverse", f"--format={_LOG_FORMAT}", f"{base}..{head}"]
        )

        commits = []
        for record in result.stdout.split(_RECORD_SEP):
            record = record.strip("\n")
            if not record:
                continue
            fields = record.split(_FIELD_SEP)
            if len(fields) < 9:
                logger.warning("Skipping malformed git log record", extra={"record": record})
                continue
            sha, parents, a_name, a_email, a_date, c_name, c_email, c_date = fields[:8]
            commits.append(
                GitCommit(
                    sha=sha,
                    message=_FIELD_SEP.join(fields[8:]).strip(),
                    author_name=a_name,
                    author_email=a_email,
                    author_date=a_date,
                    committer_name=c_name,
                    committer_email=c_email,
                    committer_date=c_date,
                    parents=tuple(parents.split()),
                )
            )
        return commits

    async def load_snapshot(self, base: str, head: str) -> RepositorySnapshot:
        """Classify changed files and collect commits between two revisions."""
        await self.verify_revision(base)
        await self.verify_revision(head)

        changes, commits = await asyncio.gather(
            self.get_file_changes(base, head), self.get_commits(base, head)
        )

        modified, created, deleted = classify_changes(changes)
        logger.info(
            "Loaded repository snapshot",
            extra={
                "repo_path": str(self.repo_path),
                "modified": len(modified),
                "created": len(created),
                "deleted": len(deleted),
                "commits": len(commits),
            },
        )
        return RepositorySnapshot(
            modified_files=modified,
            created_files=created,
            deleted_files=deleted,
            commits=commits,
        )


def classify_changes(
    changes: List[FileChange],
) -> Tuple[List[str], List[str], List[str]]:
    """Split changes into modified, created and deleted paths.

    Renames count as modifications of the new path; copies as creations.
    """
    modified: List[str] = []
    created: List[str] = []
    deleted: List[str] = []
    for change in changes:
        if change.status in "AC":
            created.append(change.path_new)
        elif change.status == "D":
            deleted.append(change.path_old)
        else:
            modified.append(change.path_new)
    return modified, created, deleted


async def open_local_session(repo_path: Union[str, Path], config: SessionConfig) -> GitDSL:
    """Build a :class:`GitDSL` over a local checkout."""
    repository = LocalGitRepository(repo_path, config)
    await repository.validate_git_version()
    snapshot = await repository.load_snapshot(config.base_sha, config.head_sha)
    return GitDSL(
        snapshot,
        config,
        content_provider=repository.get_file_contents,
        diff_provider=repository.get_full_diff,
    )
