"""Protocol interfaces for the page environment.

The tracker and navigation reference these protocols, never a concrete
browser or DOM binding. This allows:
- Tests to drive visibility and clicks with deterministic in-memory doubles
- Non-interactive render passes to run with no viewport at all
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from tocsync.models.headings import VisibilityEntry

    VisibilityCallback = Callable[[Sequence[VisibilityEntry]], None]


class ElementProtocol(Protocol):
    """An anchor target element on the page."""

    @property
    def id(self) -> str: ...


class ObservationHandle(Protocol):
    """Registration returned by ``observe_visibility``; released exactly once."""

    def disconnect(self) -> None: ...


class EnvironmentProtocol(Protocol):
    """Capabilities the tracker needs from the page it runs in."""

    @property
    def has_viewport(self) -> bool: ...

    def find_element_by_id(self, element_id: str) -> ElementProtocol | None: ...

    def observe_visibility(
        self,
        ids: Sequence[str],
        callback: VisibilityCallback,
        *,
        root_margin: str,
        threshold: float,
    ) -> ObservationHandle | None: ...

    def scroll_into_view(self, element_id: str, *, behavior: str, block: str) -> None: ...


class ClickEventProtocol(Protocol):
    """The subset of a DOM click event the navigation touches."""

    def prevent_default(self) -> None: ...
