"""JSON patches between the two revisions of a JSON-like file.

Patches follow RFC 6902. Generation is deterministic: objects yield
removals, then additions, then changes inside shared keys, each in key
order; arrays use a minimal edit script (fewest adds, removes and
replaces) and recurse into replaced containers.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import json5
from jsonpointer import JsonPointer

from .config import SessionConfig
from .errors import JSONContentParseError
from .model import FilePatch, RepositorySnapshot
from .providers import ContentProvider
from .values import JSONKind, deep_equal, kind_of

logger = logging.getLogger(__name__)

Operation = Dict[str, Any]
Parts = Tuple[str, ...]


def parse_json_content(content: str, filename: str, revision: str) -> Any:
    """Parse JSON5 text; "" (file absent) parses as an empty object.

    Raises:
        JSONContentParseError: when the text is not valid JSON5.
    """
    if content == "":
        return {}
    try:
        return json5.loads(content)
    except ValueError as exc:
        raise JSONContentParseError(filename, revision, str(exc)) from exc


def _pointer(parts: Parts) -> str:
    return JsonPointer.from_parts(parts).path


def create_patch(before: Any, after: Any) -> List[Operation]:
    """Return the operations turning ``before`` into ``after``."""
    return _diff_any(before, after, ())


def _diff_any(before: Any, after: Any, parts: Parts) -> List[Operation]:
    before_kind = kind_of(before)
    after_kind = kind_of(after)
    if before_kind is JSONKind.SEQUENCE and after_kind is JSONKind.SEQUENCE:
        return _diff_sequences(before, after, parts)
    if before_kind is JSONKind.MAPPING and after_kind is JSONKind.MAPPING:
        return _diff_mappings(before, after, parts)
    if deep_equal(before, after):
        return []
    return [{"op": "replace", "path": _pointer(parts), "value": after}]


def _diff_mappings(before: Dict[str, Any], after: Dict[str, Any], parts: Parts) -> List[Operation]:
    operations: List[Operation] = []
    for key in before:
        if key not in after:
            operations.append({"op": "remove", "path": _pointer(parts + (key,))})
    for key in after:
        if key not in before:
            operations.append({"op": "add", "path": _pointer(parts + (key,)), "value": after[key]})
    for key in before:
        if key in after:
            operations.extend(_diff_any(before[key], after[key], parts + (key,)))
    return operations


def _edit_script(before: Sequence, after: Sequence) -> List[Tuple[str, int, Any]]:
    """Levenshtein edit script as (op, before_index, payload) in array order.

    Ties prefer remove, then add, then replace.
    """
    rows, cols = len(before), len(after)
    cost = [[0] * (cols + 1) for _ in range(rows + 1)]
    step: List[List[Optional[str]]] = [[None] * (cols + 1) for _ in range(rows + 1)]

    for i in range(rows + 1):
        for j in range(cols + 1):
            if i == 0 and j == 0:
                continue
            if i > 0 and j > 0 and deep_equal(before[i - 1], after[j - 1]):
                cost[i][j] = cost[i - 1][j - 1]
                step[i][j] = "keep"
                continue
            best_op, best_cost = "", 0
            if i > 0:
                best_op, best_cost = "remove", cost[i - 1][j] + 1
            if j > 0 and (not best_op or cost[i][j - 1] + 1 < best_cost):
                best_op, best_cost = "add", cost[i][j - 1] + 1
            if i > 0 and j > 0 and cost[i - 1][j - 1] + 1 < best_cost:
                best_op, best_cost = "replace", cost[i - 1][j - 1] + 1
            cost[i][j] = best_cost
            step[i][j] = best_op

    script: List[Tuple[str, int, Any]] = []
    i, j = rows, cols
    while i or j:
        move = step[i][j]
        if move == "keep":
            i, j = i - 1, j - 1
        elif move == "remove":
            script.append(("remove", i - 1, None))
            i -= 1
        elif move == "add":
            script.append(("add", i - 1, after[j - 1]))
            j -= 1
        else:
            script.append(("replace", i - 1, (before[i - 1], after[j - 1])))
            i, j = i - 1, j - 1
    script.reverse()
    return script


def _diff_sequences(before: Sequence, after: Sequence, parts: Parts) -> List[Operation]:
    operations: List[Operation] = []
    # Net inserts minus removals applied so far; shifts later indexes
    padding = 0
    for op, index, payload in _edit_script(before, after):
        if op == "add":
            position = index + 1 + padding
            token = str(position) if position < len(before) + padding else "-"
            operations.append({"op": "add", "path": _pointer(parts + (token,)), "value": payload})
            padding += 1
        elif op == "remove":
            operations.append({"op": "remove", "path": _pointer(parts + (str(index + padding),))})
            padding -= 1
        else:
            original, value = payload
            operations.extend(_diff_any(original, value, parts + (str(index + padding),)))
    return operations


class JSONPatchBuilder:
    """Computes RFC 6902 patches for modified files."""

    def __init__(
        self,
        config: SessionConfig,
        snapshot: RepositorySnapshot,
        content_provider: ContentProvider,
    ):
        self.config = config
        self.snapshot = snapshot
        self.content_provider = content_provider

    async def patch_for_file(self, filename: str) -> Optional[FilePatch]:
        """Return the patch for a modified file, otherwise None.

        Raises:
            JSONContentParseError: when either revision is not JSON5; other
                files of the session are unaffected.
        """
        if filename not in self.snapshot.modified_files:
            logger.debug("File is not modified, no JSON patch", extra={"filename": filename})
            return None

        revisions = self.config.revisions
        base_content, head_content = await asyncio.gather(
            self.content_provider(filename, self.config.repo, revisions.base),
            self.content_provider(filename, self.config.repo, revisions.head),
        )

        base_json = parse_json_content(base_content, filename, revisions.base)
        head_json = parse_json_content(head_content, filename, revisions.head)

        operations = create_patch(base_json, head_json)
        logger.debug(
            "Computed JSON patch",
            extra={"filename": filename, "operations": len(operations)},
        )

        return FilePatch(
            before=None if base_content == "" else base_json,
            after=None if head_content == "" else head_json,
            patch=operations,
        )
