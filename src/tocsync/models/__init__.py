from __future__ import annotations

from tocsync.models.headings import (
    FlatHeadingRef,
    HeadingNode,
    VisibilityEntry,
    anchor_to_id,
)

__all__ = [
    "HeadingNode",
    "FlatHeadingRef",
    "VisibilityEntry",
    "anchor_to_id",
]
