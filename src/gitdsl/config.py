"""Configuration management for the Git DSL engine."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .model import RevisionPair


@dataclass(frozen=True)
class SessionConfig:
    """Configuration for one diff session between two revisions."""

    # Required parameters
    base_sha: str
    head_sha: str

    # Repository identifier handed to the content provider
    repo: Optional[str] = None

    # Joins lines in text diff views
    line_separator: str = field(default=os.linesep)

    # Local git provider options
    context_lines: int = 3
    find_renames_threshold: int = 90  # percentage
    git_timeout: float = 300.0

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.base_sha or not self.base_sha.strip():
            raise ValueError("base_sha cannot be empty")
        if not self.head_sha or not self.head_sha.strip():
            raise ValueError("head_sha cannot be empty")
        if not self.line_separator:
            raise ValueError("line_separator cannot be empty")
        if self.context_lines < 0:
            raise ValueError("context_lines cannot be negative")
        if not (0 <= self.find_renames_threshold <= 100):
            raise ValueError("find_renames_threshold must be between 0 and 100")
        if self.git_timeout <= 0:
            raise ValueError("git_timeout must be positive")

    @property
    def revisions(self) -> RevisionPair:
        """The comparison window of this session."""
        return RevisionPair(base=self.base_sha, head=self.head_sha)

    @property
    def git_env(self) -> Dict[str, str]:
        """Get Git environment variables for deterministic output."""
        env = os.environ.copy()

        # Use platform-appropriate null device
        null_device = "NUL" if os.name == "nt" else "/dev/null"

        env.update(
            {
                "LC_ALL": "C",
                "GIT_CONFIG_GLOBAL": null_device,
                "GIT_CONFIG_SYSTEM": null_device,
                "GIT_TERMINAL_PROMPT": "0",
                "GIT_ASKPASS": "echo",
                "SSH_ASKPASS": "echo",
                "GCM_INTERACTIVE": "never",
            }
        )
        return env

    def to_provenance_dict(self) -> Dict[str, Any]:
        """Convert config to provenance dictionary for output."""
        return {
            "repo": self.repo,
            "base_sha": self.base_sha,
            "head_sha": self.head_sha,
            "context_lines": self.context_lines,
            "line_separator": self.line_separator,
            "rename_detection": {
                "enabled": True,
                "threshold_pct": self.find_renames_threshold,
            },
        }
