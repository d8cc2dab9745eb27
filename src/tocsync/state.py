"""Tracker state record.

ActiveState is an immutable snapshot. The tracker replaces it wholesale by
applying the transition functions in ``tocsync.tracker``; nothing mutates a
snapshot in place, so a renderer holding an old one never sees it change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class TrackerPhase(StrEnum):
    UNINITIALIZED = "uninitialized"  # No targets observed yet
    TRACKING = "tracking"  # Observation registered; active_id may be None
    DISPOSED = "disposed"  # All observation released, no further updates


@dataclass(frozen=True)
class ActiveState:
    """Runtime state owned by the ActiveSectionTracker."""

    phase: TrackerPhase = TrackerPhase.UNINITIALIZED
    active_id: str | None = None

    # Panel visibility; only the explicit user toggle changes it
    is_expanded: bool = False

    # Ids of the current flattened heading list
    known_ids: frozenset[str] = field(default_factory=frozenset)
