"""Heading tree flattening.

Pure business logic. Turns the nested heading tree into the ordered list of
observation targets. No knowledge of the environment, tracker, or rendering.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import structlog
from pydantic import TypeAdapter, ValidationError

from tocsync.models.headings import FlatHeadingRef, HeadingNode

log = structlog.get_logger()

_TREE_ADAPTER = TypeAdapter(list[HeadingNode])


def coerce_heading_tree(raw: Any) -> list[HeadingNode]:
    """Validate raw input into a list of HeadingNode.

    Absent or non-sequence input is "no headings". Strings, bytes and
    mappings are sequences in the loose sense but never a heading tree.
    A sequence that fails validation is treated the same way.
    """
    if raw is None:
        return []
    if isinstance(raw, (str, bytes, bytearray, Mapping)) or not isinstance(raw, Sequence):
        log.debug("heading_tree_not_a_sequence", type=type(raw).__name__)
        return []
    if all(isinstance(node, HeadingNode) for node in raw):
        return list(raw)

    try:
        return _TREE_ADAPTER.validate_python(list(raw))
    except ValidationError as exc:
        log.warning("heading_tree_invalid", error_count=exc.error_count())
        return []


def flatten_headings(tree: Any) -> tuple[FlatHeadingRef, ...]:
    """Flatten a heading tree depth-first, parent before children.

    Sibling order is preserved. Wrapper nodes without an anchor contribute
    their children only. Empty, absent or malformed input yields ``()``.
    """
    refs: list[FlatHeadingRef] = []

    def _walk(nodes: list[HeadingNode]) -> None:
        for node in nodes:
            if node.id:
                refs.append(FlatHeadingRef(id=node.id, anchor=node.anchor))
            if node.children:
                _walk(node.children)

    _walk(coerce_heading_tree(tree))
    return tuple(refs)


class HeadingIndex:
    """Memoised flattening keyed on the tree's value.

    Holds a deep copy of the last tree it flattened, so a caller mutating its
    tree in place is detected as a content change rather than served stale.
    """

    def __init__(self) -> None:
        self._nodes: list[HeadingNode] | None = None
        self._refs: tuple[FlatHeadingRef, ...] = ()

    @property
    def refs(self) -> tuple[FlatHeadingRef, ...]:
        return self._refs

    def changed(self, nodes: list[HeadingNode]) -> bool:
        """Return True if ``refs_for(nodes)`` would recompute.

        Takes an already coerced tree; see ``coerce_heading_tree``.
        """
        return self._nodes is None or nodes != self._nodes

    def refs_for(self, nodes: list[HeadingNode]) -> tuple[FlatHeadingRef, ...]:
        if self._nodes is not None and nodes == self._nodes:
            return self._refs

        self._nodes = [node.model_copy(deep=True) for node in nodes]
        self._refs = flatten_headings(nodes)
        log.debug("heading_index_rebuilt", ref_count=len(self._refs))
        return self._refs
