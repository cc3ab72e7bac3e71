"""Unified diff parsing into structured per-file entries."""

import logging
from typing import Optional

from unidiff import PatchSet
from unidiff.errors import UnidiffParseError
from unidiff.patch import Hunk, PatchedFile

from .errors import DiffParseError
from .model import DEV_NULL, ChangeKind, Chunk, FileDiffEntry, LineChange, StructuredDiff

logger = logging.getLogger(__name__)

# Markers of real line changes; "\" lines are no-newline annotations
_CHANGE_MARKERS = ("+", "-", " ")


class DiffProcessor:
    """Parses unified diff text into a :data:`StructuredDiff`."""

    def parse(self, unified_diff: str, base: str = "", head: str = "") -> StructuredDiff:
        """Parse the full diff between two revisions.

        Raises:
            DiffParseError: when the text is not a well-formed unified diff.
        """
        if not unified_diff.strip():
            logger.debug("Empty unified diff", extra={"base": base, "head": head})
            return []

        try:
            patch_set = PatchSet(unified_diff)
        except UnidiffParseError as exc:
            logger.warning(
                "Unified diff could not be parsed",
                extra={"base": base, "head": head, "reason": str(exc)},
            )
            raise DiffParseError(str(exc), base, head) from exc

        entries = [self._process_patched_file(patched_file) for patched_file in patch_set]
        logger.debug(
            "Parsed unified diff",
            extra={"base": base, "head": head, "files": len(entries)},
        )
        return entries

    def _process_patched_file(self, patched_file: PatchedFile) -> FileDiffEntry:
        """Convert one file section of the patch."""
        from_path = self._strip_prefix(patched_file.source_file, "a/")
        to_path = self._strip_prefix(patched_file.target_file, "b/")
        # Git headers name both sides even for added and removed files
        if patched_file.is_added_file:
            from_path = None
        if patched_file.is_removed_file:
            to_path = None

        entry = FileDiffEntry(
            from_path=from_path,
            to_path=to_path,
            chunks=[self._create_chunk(hunk) for hunk in patched_file],
        )
        logger.debug(
            "Processed file diff",
            extra={
                "from_path": entry.from_path,
                "to_path": entry.to_path,
                "chunks": len(entry.chunks),
            },
        )
        return entry

    def _create_chunk(self, hunk: Hunk) -> Chunk:
        """Create a Chunk keeping line order and diff markers."""
        header = (
            f"@@ -{hunk.source_start},{hunk.source_length} "
            f"+{hunk.target_start},{hunk.target_length} @@"
        )
        if hunk.section_header:
            header = f"{header} {hunk.section_header}"

        changes = []
        for line in hunk:
            if line.line_type not in _CHANGE_MARKERS:
                continue
            changes.append(
                LineChange(
                    kind=ChangeKind.from_marker(line.line_type),
                    content=line.line_type + line.value.rstrip("\n"),
                    old_lineno=line.source_line_no,
                    new_lineno=line.target_line_no,
                )
            )

        return Chunk(
            header=header,
            old_start=hunk.source_start,
            old_lines=hunk.source_length,
            new_start=hunk.target_start,
            new_lines=hunk.target_length,
            changes=changes,
        )

    @staticmethod
    def _strip_prefix(path: Optional[str], prefix: str) -> Optional[str]:
        """Drop the a/ or b/ prefix; /dev/null means the side is absent."""
        if not path or path == DEV_NULL:
            return None
        if path.startswith(prefix):
            return path[len(prefix):]
        return path
