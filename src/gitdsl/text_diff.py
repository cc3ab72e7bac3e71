"""Text views of a single file's diff."""

import asyncio
import logging
from typing import Optional

from .config import SessionConfig
from .model import ChangeKind, FileTextDiff
from .providers import ContentProvider
from .resolver import StructuredDiffResolver

logger = logging.getLogger(__name__)


class TextDiffComposer:
    """Builds before/after/diff/added/removed text for one file."""

    def __init__(
        self,
        config: SessionConfig,
        resolver: StructuredDiffResolver,
        content_provider: ContentProvider,
    ):
        self.config = config
        self.resolver = resolver
        self.content_provider = content_provider

    async def diff_for_file(self, filename: str) -> Optional[FileTextDiff]:
        """Return the text diff, or None when the file has no diff.

        ``before``/``after`` are "" at a revision where the file is absent.
        """
        entry = await self.resolver.for_file(filename)
        if entry is None:
            return None

        changes = list(entry.iter_changes())
        separator = self.config.line_separator

        revisions = self.config.revisions
        before, after = await asyncio.gather(
            self.content_provider(filename, self.config.repo, revisions.base),
            self.content_provider(filename, self.config.repo, revisions.head),
        )

        text_diff = FileTextDiff(
            before=before,
            after=after,
            diff=separator.join(change.content for change in changes),
            added=separator.join(
                change.content for change in changes if change.kind is ChangeKind.ADD
            ),
            removed=separator.join(
                change.content for change in changes if change.kind is ChangeKind.DELETE
            ),
        )
        logger.debug(
            "Composed text diff",
            extra={"filename": filename, "lines": len(changes)},
        )
        return text_diff
