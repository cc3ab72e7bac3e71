"""Error definitions and handling for the Git DSL engine."""

from typing import Any, Dict, Optional


class GitDSLError(Exception):
    """Base exception for Git DSL errors."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize error with code, message, and optional details."""
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON serialization."""
        result = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class DiffParseError(GitDSLError):
    """Raw unified diff text could not be parsed."""

    def __init__(self, reason: str, base: str, head: str):
        super().__init__(
            code="DIFF_PARSE_FAILED",
            message=f"Failed to parse diff between {base} and {head}: {reason}",
            details={"base": base, "head": head, "reason": reason},
        )


class JSONContentParseError(GitDSLError):
    """File content is not valid JSON5 at one revision."""

    def __init__(self, filename: str, revision: str, reason: str):
        super().__init__(
            code="JSON_PARSE_FAILED",
            message=f"Could not parse {filename} at {revision} as JSON: {reason}",
            details={"filename": filename, "revision": revision, "reason": reason},
        )
        self.filename = filename
        self.revision = revision


class ProviderNotConfiguredError(GitDSLError):
    """Neither a raw nor a structured diff provider was supplied."""

    def __init__(self) -> None:
        super().__init__(
            code="PROVIDER_MISSING",
            message="A diff provider or structured diff provider is required",
        )


class GitVersionUnsupportedError(GitDSLError):
    """Git version is not supported."""

    def __init__(self, detected_version: str, required_version: str = "2.30"):
        super().__init__(
            code="GIT_VERSION_UNSUPPORTED",
            message=f"Git version {detected_version} is not supported. "
            f"Minimum required: {required_version}",
            details={
                "detected_version": detected_version,
                "required_version": required_version,
            },
        )


class RevisionNotFoundError(GitDSLError):
    """A revision could not be resolved in the repository."""

    def __init__(self, revision: str, repo_path: str):
        super().__init__(
            code="REVISION_NOT_FOUND",
            message=f"Revision not found: {revision}",
            details={"revision": revision, "repo_path": repo_path},
        )


class GitCommandError(GitDSLError):
    """A git command exited with a non-zero status."""

    def __init__(self, args: list[str], returncode: int, stderr: str):
        super().__init__(
            code="GIT_COMMAND_FAILED",
            message=f"git {' '.join(args)} failed with exit code {returncode}",
            details={"args": args, "returncode": returncode, "stderr": stderr.strip()},
        )
        self.stderr = stderr


class GitTimeoutError(GitDSLError):
    """A git command timed out."""

    def __init__(self, operation: str, timeout_seconds: float):
        super().__init__(
            code="GIT_TIMEOUT",
            message=f"Timeout during {operation} after {timeout_seconds}s",
            details={"operation": operation, "timeout_seconds": timeout_seconds},
        )


class RepositoryNotFoundError(GitDSLError):
    """The repository path is not a directory."""

    def __init__(self, repo_path: str):
        super().__init__(
            code="REPOSITORY_NOT_FOUND",
            message=f"Repository not found: {repo_path}",
            details={"repo_path": repo_path},
        )
