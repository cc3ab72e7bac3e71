"""Interfaces of the collaborators that supply file content and diffs.

Implementations live outside the engine (hosting-platform clients) or in
:mod:`gitdsl.vcs` for local checkouts. Provider exceptions are transport
failures and reach callers unchanged.
"""

from typing import Any, Dict, Iterable, Optional, Protocol, Union

from .model import FileDiffEntry


class ContentProvider(Protocol):
    """Returns a file's text at a revision."""

    async def __call__(self, path: str, repo: Optional[str], sha: str) -> str:
        """Return the content, or "" when ``path`` does not exist at ``sha``."""
        ...


class DiffProvider(Protocol):
    """Returns the raw unified diff between two revisions."""

    async def __call__(self, base: str, head: str) -> str:
        ...


class StructuredDiffProvider(Protocol):
    """Returns the already-parsed diff between two revisions.

    Entries may be :class:`FileDiffEntry` objects or their dict payload form
    (``{from, to, chunks: [{changes: [{type, content}]}]}``).
    """

    async def __call__(
        self, base: str, head: str
    ) -> Iterable[Union[FileDiffEntry, Dict[str, Any]]]:
        ...
