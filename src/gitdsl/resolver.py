"""Memoized structured diff between the two revisions of a session."""

import asyncio
import logging
from typing import Optional

from .config import SessionConfig
from .diffpack import DiffProcessor
from .errors import ProviderNotConfiguredError
from .model import FileDiffEntry, StructuredDiff
from .providers import DiffProvider, StructuredDiffProvider

logger = logging.getLogger(__name__)


class StructuredDiffResolver:
    """Fetches the full structured diff once per session.

    The first caller of :meth:`resolve` starts the fetch; callers arriving
    while it is in flight await the same task, and later callers get the
    stored result. A failed fetch is not retried: its exception is raised
    to every caller.
    """

    def __init__(
        self,
        config: SessionConfig,
        diff_provider: Optional[DiffProvider] = None,
        structured_diff_provider: Optional[StructuredDiffProvider] = None,
        processor: Optional[DiffProcessor] = None,
    ):
        """Initialize with config and at least one diff provider."""
        if diff_provider is None and structured_diff_provider is None:
            raise ProviderNotConfiguredError()
        self.config = config
        self._diff_provider = diff_provider
        self._structured_diff_provider = structured_diff_provider
        self._processor = processor or DiffProcessor()
        self._task: Optional["asyncio.Task[StructuredDiff]"] = None
        self.fetch_count = 0

    async def resolve(self) -> StructuredDiff:
        """Return the structured diff for the session's revisions."""
        if self._task is None:
            self._task = asyncio.ensure_future(self._fetch())
        return await self._task

    async def for_file(self, filename: str) -> Optional[FileDiffEntry]:
        """Return the entry whose old or new path is ``filename``, if any."""
        entries = await self.resolve()
        for entry in entries:
            if entry.matches(filename):
                return entry
        logger.debug("No structured diff for file", extra={"filename": filename})
        return None

    async def _fetch(self) -> StructuredDiff:
        """Call the configured provider; the structured one wins."""
        revisions = self.config.revisions
        self.fetch_count += 1
        logger.info(
            "Fetching structured diff",
            extra={
                "base": revisions.base,
                "head": revisions.head,
                "structured": self._structured_diff_provider is not None,
            },
        )

        if self._structured_diff_provider is not None:
            payload = await self._structured_diff_provider(revisions.base, revisions.head)
            entries = [
                entry if isinstance(entry, FileDiffEntry) else FileDiffEntry.from_dict(entry)
                for entry in payload
            ]
        else:
            raw_diff = await self._diff_provider(revisions.base, revisions.head)
            entries = self._processor.parse(raw_diff, revisions.base, revisions.head)

        logger.info(
            "Structured diff resolved",
            extra={"base": revisions.base, "head": revisions.head, "files": len(entries)},
        )
        return entries
