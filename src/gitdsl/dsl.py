"""The git DSL handed to rule evaluation: file sets plus per-file diff views."""

import logging
from typing import Any, Dict, Optional, Tuple

from .config import SessionConfig
from .json_diff import JSONDiffTreeBuilder
from .json_patch import JSONPatchBuilder
from .model import FileDiffEntry, FilePatch, FileTextDiff, GitCommit, RepositorySnapshot
from .providers import ContentProvider, DiffProvider, StructuredDiffProvider
from .resolver import StructuredDiffResolver
from .text_diff import TextDiffComposer

logger = logging.getLogger(__name__)

# View names accepted by GitDSL.view_for_file
VIEWS = ("text", "structured", "patch", "json-diff")


class GitDSL:
    """Per-session access to the diff between two revisions.

    None of the lookups raise when a file simply has no diff; they return
    None (or an empty dict for :meth:`json_diff_for_file`). Provider and
    parse failures propagate.
    """

    def __init__(
        self,
        snapshot: RepositorySnapshot,
        config: SessionConfig,
        content_provider: ContentProvider,
        diff_provider: Optional[DiffProvider] = None,
        structured_diff_provider: Optional[StructuredDiffProvider] = None,
    ):
        self.snapshot = snapshot
        self.config = config
        self.resolver = StructuredDiffResolver(
            config,
            diff_provider=diff_provider,
            structured_diff_provider=structured_diff_provider,
        )
        self._text = TextDiffComposer(config, self.resolver, content_provider)
        self._patches = JSONPatchBuilder(config, snapshot, content_provider)
        self._trees = JSONDiffTreeBuilder(self._patches)

    @property
    def modified_files(self) -> Tuple[str, ...]:
        return self.snapshot.modified_files

    @property
    def created_files(self) -> Tuple[str, ...]:
        return self.snapshot.created_files

    @property
    def deleted_files(self) -> Tuple[str, ...]:
        return self.snapshot.deleted_files

    @property
    def commits(self) -> Tuple[GitCommit, ...]:
        return self.snapshot.commits

    async def diff_for_file(self, filename: str) -> Optional[FileTextDiff]:
        """Text diff of a file, or None."""
        return await self._text.diff_for_file(filename)

    async def structured_diff_for_file(self, filename: str) -> Optional[FileDiffEntry]:
        """Structured diff entry of a file (matched on old or new path), or None."""
        return await self.resolver.for_file(filename)

    async def json_patch_for_file(self, filename: str) -> Optional[FilePatch]:
        """JSON patch of a modified file, or None."""
        return await self._patches.patch_for_file(filename)

    async def json_diff_for_file(self, filename: str) -> Dict[str, Any]:
        """JSON diff tree of a modified file; empty when not applicable."""
        return await self._trees.diff_tree_for_file(filename)

    async def view_for_file(self, filename: str, view: str) -> Any:
        """Dispatch to one of the per-file lookups by view name."""
        if view == "text":
            return await self.diff_for_file(filename)
        if view == "structured":
            return await self.structured_diff_for_file(filename)
        if view == "patch":
            return await self.json_patch_for_file(filename)
        if view == "json-diff":
            return await self.json_diff_for_file(filename)
        raise ValueError(f"Unknown view {view!r}; expected one of {', '.join(VIEWS)}")


def git_json_to_git_dsl(
    git_json: Dict[str, Any],
    config: SessionConfig,
    content_provider: ContentProvider,
    diff_provider: Optional[DiffProvider] = None,
    structured_diff_provider: Optional[StructuredDiffProvider] = None,
) -> GitDSL:
    """Wrap the JSON form of a repository snapshot into a full :class:`GitDSL`."""
    snapshot = RepositorySnapshot.from_dict(git_json)
    logger.debug(
        "Building git DSL",
        extra={
            "modified": len(snapshot.modified_files),
            "created": len(snapshot.created_files),
            "deleted": len(snapshot.deleted_files),
            "commits": len(snapshot.commits),
        },
    )
    return GitDSL(
        snapshot,
        config,
        content_provider,
        diff_provider=diff_provider,
        structured_diff_provider=structured_diff_provider,
    )
