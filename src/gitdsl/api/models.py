"""Pydantic models for Git DSL API requests and responses."""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class SnapshotRequest(BaseModel):
    """Request model for the snapshot endpoint."""

    repo_path: Optional[str] = Field(
        None,
        description="Absolute path of a local repository (default: $GITDSL_REPO_PATH)",
        examples=["/srv/repos/app"],
    )
    base_sha: str = Field(
        ...,
        description="Base revision",
        examples=["ba7765dd48c0ba51f4fd12cde48fd100aecdb743"],
    )
    head_sha: str = Field(
        ...,
        description="Head revision",
        examples=["d7a39abec5a282b9955afdd1649a5f1bafae35f7"],
    )
    context_lines: int = Field(
        3,
        description="Number of context lines in diffs",
        ge=0,
        le=10,
    )
    find_renames_threshold: int = Field(
        90,
        description="Rename detection threshold percentage",
        ge=0,
        le=100,
    )

    @field_validator("repo_path")
    @classmethod
    def repo_path_must_be_absolute(cls, v):
        """Only absolute local paths are accepted."""
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("repo_path cannot be empty")
        if not (v.startswith("/") or (len(v) > 2 and v[1] == ":")):
            raise ValueError("repo_path must be an absolute path")
        return v

    @field_validator("base_sha", "head_sha")
    @classmethod
    def revision_must_be_valid(cls, v):
        """Basic validation for revisions."""
        v = v.strip()
        if not v:
            raise ValueError("revision cannot be empty")
        if v.startswith("-"):
            raise ValueError("revision cannot start with '-'")
        return v


class FileDiffRequest(SnapshotRequest):
    """Request model for the per-file diff endpoint."""

    filename: str = Field(
        ...,
        description="Repository-relative path of the file",
        examples=["package.json"],
    )
    view: Literal["text", "structured", "patch", "json-diff"] = Field(
        "text",
        description="Which diff view to return",
    )
    line_separator: Optional[str] = Field(
        None,
        description="Separator joining lines of the text view "
        "(default: $GITDSL_LINE_SEPARATOR or the server OS newline)",
        min_length=1,
    )

    @field_validator("filename")
    @classmethod
    def filename_must_be_relative(cls, v):
        """Filenames are repository-relative."""
        v = v.strip()
        if not v:
            raise ValueError("filename cannot be empty")
        if v.startswith("/"):
            raise ValueError("filename must be relative to the repository root")
        return v


class HealthResponse(BaseModel):
    """Whether the engine can open sessions on this host."""

    status: str = Field(..., examples=["healthy", "degraded"])
    version: str = Field(..., examples=["1.0.0"])
    git_version: Optional[str] = Field(None, examples=["2.34.1"])
    git_supported: bool = Field(..., description="git is installed and at least 2.30")
    default_repo_configured: bool = Field(
        ..., description="Requests may omit repo_path ($GITDSL_REPO_PATH is set)"
    )


class VersionResponse(BaseModel):
    """Engine, git and parser library versions."""

    version: str = Field(..., examples=["1.0.0"])
    api_version: str = Field(..., examples=["v1"])
    git_version: Optional[str] = Field(None, examples=["2.34.1"])
    minimum_git_version: str = Field(..., examples=["2.30"])
    supported_views: List[str] = Field(..., examples=[["text", "structured", "patch", "json-diff"]])
    libraries: Dict[str, Optional[str]] = Field(
        ...,
        description="Installed versions of the diff, JSON5 and pointer libraries",
        examples=[{"unidiff": "0.7.5", "json5": "0.9.25", "jsonpointer": "3.0.0"}],
    )
