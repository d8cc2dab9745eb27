"""Active-section tracking.

The state machine is expressed as pure transition functions over
``ActiveState``. ``ActiveSectionTracker`` wires them to an injected
environment: it registers visibility observation for the current heading
list, applies notifications as they arrive, and releases observation on tree
change and teardown.

Phases:
  uninitialized → tracking    once at least one target element is observed
  tracking → uninitialized    on tree change (old observation released first)
  any → disposed              on teardown; terminal
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

import structlog

from tocsync.config import TrackerSettings
from tocsync.environment import HeadlessEnvironment
from tocsync.flatten import HeadingIndex, coerce_heading_tree
from tocsync.models.headings import anchor_to_id
from tocsync.state import ActiveState, TrackerPhase

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import Any

    from tocsync.models.headings import FlatHeadingRef, VisibilityEntry
    from tocsync.protocols import EnvironmentProtocol, ObservationHandle

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def on_tree_change(state: ActiveState, refs: Sequence[FlatHeadingRef]) -> ActiveState:
    """Adopt a new heading list. Drops an active id the new list lacks."""
    if state.phase is TrackerPhase.DISPOSED:
        return state
    known_ids = frozenset(ref.id for ref in refs)
    active_id = state.active_id if state.active_id in known_ids else None
    return replace(
        state,
        phase=TrackerPhase.UNINITIALIZED,
        active_id=active_id,
        known_ids=known_ids,
    )


def on_observation_started(state: ActiveState) -> ActiveState:
    if state.phase is not TrackerPhase.UNINITIALIZED:
        return state
    return replace(state, phase=TrackerPhase.TRACKING)


def on_intersection(state: ActiveState, entry: VisibilityEntry) -> ActiveState:
    """Apply one visibility crossing. Last intersecting entry wins.

    Exits never clear the active id; the previous section stays highlighted
    until another heading crosses into the band.
    """
    if state.phase is not TrackerPhase.TRACKING:
        return state
    if not entry.is_intersecting or entry.target_id not in state.known_ids:
        return state
    if entry.target_id == state.active_id:
        return state
    return replace(state, active_id=entry.target_id)


def on_dispose(state: ActiveState) -> ActiveState:
    if state.phase is TrackerPhase.DISPOSED and state.active_id is None:
        return state
    return replace(
        state,
        phase=TrackerPhase.DISPOSED,
        active_id=None,
        known_ids=frozenset(),
    )


def toggle_expanded(state: ActiveState) -> ActiveState:
    return replace(state, is_expanded=not state.is_expanded)


# ---------------------------------------------------------------------------
# Tracker
# ---------------------------------------------------------------------------


class ActiveSectionTracker:
    """Keeps the single active heading id in sync with page visibility."""

    def __init__(
        self,
        environment: EnvironmentProtocol | None = None,
        settings: TrackerSettings | None = None,
    ) -> None:
        self._env: EnvironmentProtocol = environment or HeadlessEnvironment()
        self._settings = settings or TrackerSettings()
        self._index = HeadingIndex()
        self._state = ActiveState()
        self._handle: ObservationHandle | None = None
        # Bumped whenever observation is released; stale callbacks compare
        # their captured generation against it and bail out.
        self._generation = 0

    @property
    def state(self) -> ActiveState:
        return self._state

    @property
    def active_id(self) -> str | None:
        return self._state.active_id

    @property
    def phase(self) -> TrackerPhase:
        return self._state.phase

    @property
    def refs(self) -> tuple[FlatHeadingRef, ...]:
        return self._index.refs

    @property
    def is_disposed(self) -> bool:
        return self._state.phase is TrackerPhase.DISPOSED

    def update_headings(self, tree: Any) -> None:
        """Re-target observation at a new heading tree.

        A tree equal by value to the current one is a no-op. Otherwise the
        old observation is released before the new one is registered.
        """
        if self.is_disposed:
            log.debug("tracker_update_after_dispose_ignored")
            return
        nodes = coerce_heading_tree(tree)
        if self._state.known_ids and not self._index.changed(nodes):
            return

        self._release()
        refs = self._index.refs_for(nodes)
        self._state = on_tree_change(self._state, refs)
        self._observe(refs)

    def _observe(self, refs: Sequence[FlatHeadingRef]) -> None:
        if not refs:
            return
        if not self._env.has_viewport:
            log.debug("tracker_no_viewport", ref_count=len(refs))
            return

        ids: list[str] = []
        for ref in refs:
            if self._env.find_element_by_id(ref.id) is None:
                log.debug("tracker_target_missing", id=ref.id)
                continue
            ids.append(ref.id)

        if not ids:
            return

        generation = self._generation

        def _callback(entries: Sequence[VisibilityEntry]) -> None:
            if generation != self._generation or self.is_disposed:
                log.debug("tracker_stale_notification_ignored", entry_count=len(entries))
                return
            self._apply(entries)

        handle = self._env.observe_visibility(
            ids,
            _callback,
            root_margin=self._settings.root_margin,
            threshold=self._settings.threshold,
        )
        if handle is None:
            log.debug("tracker_observation_unavailable")
            return

        self._handle = handle
        self._state = on_observation_started(self._state)
        log.debug("tracker_observation_started", target_count=len(ids), skipped=len(refs) - len(ids))

    def _apply(self, entries: Sequence[VisibilityEntry]) -> None:
        for entry in entries:
            self._state = on_intersection(self._state, entry)

    def _release(self) -> None:
        self._generation += 1
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.disconnect()
            log.debug("tracker_observation_released")

    def navigate_to(self, anchor: str) -> bool:
        """Smooth-scroll the anchor's element into view.

        Does not touch ``active_id``; the scroll triggers the same visibility
        crossing that any manual scroll would. Returns False when there is
        nothing to scroll to.
        """
        if self.is_disposed or not self._env.has_viewport:
            return False
        element_id = anchor_to_id(anchor)
        if not element_id or self._env.find_element_by_id(element_id) is None:
            log.debug("tracker_navigate_target_missing", anchor=anchor)
            return False
        self._env.scroll_into_view(
            element_id,
            behavior=self._settings.scroll_behavior,
            block=self._settings.scroll_block,
        )
        return True

    def toggle_expanded(self) -> bool:
        """Flip panel expansion (user action). Returns the new value."""
        if not self.is_disposed:
            self._state = toggle_expanded(self._state)
        return self._state.is_expanded

    def dispose(self) -> None:
        """Release all observation. Safe to call more than once."""
        self._release()
        self._state = on_dispose(self._state)
