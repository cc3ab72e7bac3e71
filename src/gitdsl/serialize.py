"""JSON serialization of DSL views for the CLI and API."""

import json
import logging
from typing import Any, Dict, Optional

from .config import SessionConfig
from .model import Chunk, FileDiffEntry, FilePatch, FileTextDiff, RepositorySnapshot

logger = logging.getLogger(__name__)


class DSLSerializer:
    """Turns engine results into JSON-ready dictionaries."""

    def serialize_snapshot(self, snapshot: RepositorySnapshot) -> Dict[str, Any]:
        """Serialize the file sets and commits of a session."""
        return {
            "modified_files": list(snapshot.modified_files),
            "created_files": list(snapshot.created_files),
            "deleted_files": list(snapshot.deleted_files),
            "commits": [commit.to_dict() for commit in snapshot.commits],
        }

    def serialize_text_diff(self, text_diff: Optional[FileTextDiff]) -> Optional[Dict[str, Any]]:
        """Serialize a text diff view."""
        if text_diff is None:
            return None
        return {
            "before": text_diff.before,
            "after": text_diff.after,
            "diff": text_diff.diff,
            "added": text_diff.added,
            "removed": text_diff.removed,
        }

    def serialize_structured_diff(
        self, entry: Optional[FileDiffEntry]
    ) -> Optional[Dict[str, Any]]:
        """Serialize a structured diff entry."""
        if entry is None:
            return None
        return {
            "from": entry.from_path,
            "to": entry.to_path,
            "chunks": [self._serialize_chunk(chunk) for chunk in entry.chunks],
        }

    def _serialize_chunk(self, chunk: Chunk) -> Dict[str, Any]:
        """Serialize a single chunk, keeping change order."""
        return {
            "header": chunk.header,
            "old_start": chunk.old_start,
            "old_lines": chunk.old_lines,
            "new_start": chunk.new_start,
            "new_lines": chunk.new_lines,
            "changes": [
                {
                    "type": change.kind.value,
                    "content": change.content,
                    "old_lineno": change.old_lineno,
                    "new_lineno": change.new_lineno,
                }
                for change in chunk.changes
            ],
        }

    def serialize_patch(self, file_patch: Optional[FilePatch]) -> Optional[Dict[str, Any]]:
        """Serialize a JSON patch view."""
        if file_patch is None:
            return None
        return {
            "before": file_patch.before,
            "after": file_patch.after,
            "patch": file_patch.patch,
        }

    def attach_provenance(self, payload: Dict[str, Any], config: SessionConfig) -> Dict[str, Any]:
        """Record which revisions and git settings produced ``payload``."""
        payload["provenance"] = config.to_provenance_dict()
        return payload

    def to_json_string(self, payload: Dict[str, Any]) -> str:
        """Convert payload to pretty-printed JSON string.

        Keys are not sorted: chunk, patch and diff tree order is meaningful.
        """
        logger.debug("Rendering payload to JSON string")
        return json.dumps(payload, ensure_ascii=False, indent=2)

    def create_success_envelope(self, payload: Any) -> Dict[str, Any]:
        """Create success envelope around payload."""
        logger.debug("Creating success envelope")
        return {"ok": True, "data": payload}

    def create_error_envelope(
        self, error_code: str, error_message: str, details: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Create error envelope."""
        logger.debug("Creating error envelope", extra={"code": error_code})
        error_data = {
            "code": error_code,
            "message": error_message,
        }
        if details:
            error_data["details"] = details

        return {"ok": False, "error": error_data}

    def serialize_view(self, view: str, result: Any) -> Any:
        """Serialize the result of :meth:`GitDSL.view_for_file`."""
        if view == "text":
            return self.serialize_text_diff(result)
        if view == "structured":
            return self.serialize_structured_diff(result)
        if view == "patch":
            return self.serialize_patch(result)
        # Diff trees are plain dicts already
        return result
