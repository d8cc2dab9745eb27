"""Concrete page environments.

``HeadlessEnvironment`` stands in for a non-interactive render pass (static
export, server-side render): there is no viewport and no element lookup, so
the tracker does nothing and reports no active section.

``InMemoryEnvironment`` is a deterministic page model. Element ids are
registered up front, visibility batches are delivered explicitly with
``notify``, and scroll requests are recorded. The CLI uses it to preview a
highlighted state; tests use it in place of a browser.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tocsync.models.headings import VisibilityEntry

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from tocsync.protocols import VisibilityCallback


class HeadlessEnvironment:
    """No viewport, no DOM."""

    @property
    def has_viewport(self) -> bool:
        return False

    def find_element_by_id(self, element_id: str) -> None:
        return None

    def observe_visibility(
        self,
        ids: Sequence[str],
        callback: VisibilityCallback,
        *,
        root_margin: str,
        threshold: float,
    ) -> None:
        return None

    def scroll_into_view(self, element_id: str, *, behavior: str, block: str) -> None:
        return None


@dataclass(frozen=True)
class PageElement:
    id: str


@dataclass(frozen=True)
class ScrollRequest:
    element_id: str
    behavior: str
    block: str


@dataclass(eq=False)
class Observation:
    """A live ``observe_visibility`` registration."""

    ids: tuple[str, ...]
    callback: VisibilityCallback
    root_margin: str
    threshold: float
    owner: InMemoryEnvironment = field(repr=False)
    connected: bool = True

    def disconnect(self) -> None:
        if not self.connected:
            return
        self.connected = False
        self.owner._observations.remove(self)


@dataclass
class InMemoryEnvironment:
    element_ids: set[str] = field(default_factory=set)
    scroll_requests: list[ScrollRequest] = field(default_factory=list)
    _observations: list[Observation] = field(default_factory=list, repr=False)

    @classmethod
    def with_elements(cls, ids: Iterable[str]) -> InMemoryEnvironment:
        return cls(element_ids=set(ids))

    @property
    def has_viewport(self) -> bool:
        return True

    @property
    def observations(self) -> tuple[Observation, ...]:
        """Registrations that have not been disconnected."""
        return tuple(self._observations)

    @property
    def observed_ids(self) -> set[str]:
        return {element_id for obs in self._observations for element_id in obs.ids}

    def add_element(self, element_id: str) -> None:
        self.element_ids.add(element_id)

    def remove_element(self, element_id: str) -> None:
        self.element_ids.discard(element_id)

    def find_element_by_id(self, element_id: str) -> PageElement | None:
        if element_id in self.element_ids:
            return PageElement(element_id)
        return None

    def observe_visibility(
        self,
        ids: Sequence[str],
        callback: VisibilityCallback,
        *,
        root_margin: str,
        threshold: float,
    ) -> Observation:
        observation = Observation(
            ids=tuple(ids),
            callback=callback,
            root_margin=root_margin,
            threshold=threshold,
            owner=self,
        )
        self._observations.append(observation)
        return observation

    def scroll_into_view(self, element_id: str, *, behavior: str, block: str) -> None:
        self.scroll_requests.append(ScrollRequest(element_id, behavior, block))

    def notify(self, *entries: VisibilityEntry) -> None:
        """Deliver a visibility batch to every live registration.

        Entries for ids a registration does not observe are filtered out, the
        way a browser only reports targets it was asked to watch.
        """
        for observation in list(self._observations):
            batch = [entry for entry in entries if entry.target_id in observation.ids]
            if batch:
                observation.callback(batch)

    def enter(self, *ids: str) -> None:
        self.notify(*(VisibilityEntry(element_id, True) for element_id in ids))

    def leave(self, *ids: str) -> None:
        self.notify(*(VisibilityEntry(element_id, False) for element_id in ids))
