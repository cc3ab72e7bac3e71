"""Navigable JSON diff trees built from JSON patches.

Every patch operation is reported on its parent structure rather than on
the bare leaf, so a changed scalar shows up with the object or array that
contains it. Nodes look like::

    {"before": ..., "after": ..., "added": [...], "removed": [...]}

and sit in a nested dict mirroring the document's pointer hierarchy.
"""

import logging
from typing import Any, Dict, Iterable

from jsonpointer import EndOfList, JsonPointer, resolve_pointer

from .json_patch import JSONPatchBuilder
from .values import JSONKind, contains_equal, empty_counterpart, kind_of, or_null

logger = logging.getLogger(__name__)


def parent_pointer(pointer: str) -> str:
    """Drop the last segment of pointers deeper than one level."""
    parts = JsonPointer(pointer).parts
    if len(parts) <= 1:
        return pointer
    return JsonPointer.from_parts(parts[:-1]).path


def _resolve(document: Any, pointer: str) -> Any:
    value = resolve_pointer(document, pointer, None)
    if isinstance(value, EndOfList):
        return None
    return or_null(value)


def diff_node(before: Any, after: Any) -> Dict[str, Any]:
    """Describe one changed structure, with added/removed where shapes allow."""
    node: Dict[str, Any] = {"before": before, "after": after}

    before_value = before if before is not None else empty_counterpart(after)
    after_value = after if after is not None else empty_counterpart(before)
    before_kind = kind_of(before_value)
    after_kind = kind_of(after_value)

    if before_kind is JSONKind.SEQUENCE and after_kind is JSONKind.SEQUENCE:
        node["added"] = [item for item in after_value if not contains_equal(before_value, item)]
        node["removed"] = [item for item in before_value if not contains_equal(after_value, item)]
    elif before_kind is JSONKind.MAPPING and after_kind is JSONKind.MAPPING:
        node["added"] = [key for key in after_value if key not in before_value]
        node["removed"] = [key for key in before_value if key not in after_value]

    return node


def _set_node(tree: Dict[str, Any], pointer: str, node: Dict[str, Any]) -> None:
    """Place ``node`` at ``pointer``, creating mappings along the way."""
    parts = JsonPointer(pointer).parts
    if not parts:
        tree.clear()
        tree.update(node)
        return

    current = tree
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = current[part] = {}
        current = child
    current[parts[-1]] = node


def build_diff_tree(
    patch: Iterable[Dict[str, Any]], before: Any, after: Any
) -> Dict[str, Any]:
    """Flatten patch operations into a diff tree.

    ``before``/``after`` of None mean the file is absent at that revision
    and resolve as empty objects. When several operations share a parent
    pointer the last one determines the node.
    """
    before_doc = {} if before is None else before
    after_doc = {} if after is None else after

    tree: Dict[str, Any] = {}
    for operation in patch:
        pointer = parent_pointer(operation["path"])
        node = diff_node(_resolve(before_doc, pointer), _resolve(after_doc, pointer))
        _set_node(tree, pointer, node)
    return tree


class JSONDiffTreeBuilder:
    """Builds diff trees for files with a JSON patch."""

    def __init__(self, patch_builder: JSONPatchBuilder):
        self.patch_builder = patch_builder

    async def diff_tree_for_file(self, filename: str) -> Dict[str, Any]:
        """Return the diff tree, or an empty dict when no patch applies."""
        file_patch = await self.patch_builder.patch_for_file(filename)
        if file_patch is None:
            return {}

        tree = build_diff_tree(file_patch.patch, file_patch.before, file_patch.after)
        logger.debug(
            "Built JSON diff tree",
            extra={"filename": filename, "operations": len(file_patch.patch)},
        )
        return tree
