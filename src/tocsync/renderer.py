"""Nested navigation rendering.

``TocNavigation`` renders the original heading tree (not the flattened list)
as a collapsible ``<nav>`` with the tracker's active heading highlighted, and
converts link clicks into programmatic smooth scrolls.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from jinja2 import Environment, PackageLoader, select_autoescape

from tocsync.config import RenderSettings
from tocsync.flatten import coerce_heading_tree
from tocsync.tracker import ActiveSectionTracker

if TYPE_CHECKING:
    from tocsync.models.headings import HeadingNode
    from tocsync.protocols import ClickEventProtocol

log = structlog.get_logger()

_TEMPLATE_NAME = "toc.html.jinja"

_jinja = Environment(
    loader=PackageLoader("tocsync", "templates"),
    autoescape=select_autoescape(["html", "jinja"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_nested_list(
    nodes: list[HeadingNode],
    active_id: str | None,
    settings: RenderSettings | None = None,
) -> str:
    """Render the bare ``<ol>`` hierarchy. Empty string for an empty tree."""
    if not nodes:
        return ""
    template = _jinja.get_template(_TEMPLATE_NAME)
    return template.render(
        headings=nodes,
        active_id=active_id,
        css=settings or RenderSettings(),
        list_only=True,
    )


class TocNavigation:
    """Collapsible table of contents bound to an ActiveSectionTracker."""

    def __init__(
        self,
        headings: Any = None,
        tracker: ActiveSectionTracker | None = None,
        settings: RenderSettings | None = None,
        *,
        content_id: str = "toc-content",
    ) -> None:
        self._tracker = tracker or ActiveSectionTracker()
        self._settings = settings or RenderSettings()
        self._content_id = content_id
        self._nodes: list[HeadingNode] = []
        self.headings = headings

    @property
    def headings(self) -> list[HeadingNode]:
        return self._nodes

    @headings.setter
    def headings(self, tree: Any) -> None:
        if self.closed:
            log.debug("navigation_update_after_close_ignored")
            return
        self._nodes = coerce_heading_tree(tree)
        self._tracker.update_headings(self._nodes)

    @property
    def tracker(self) -> ActiveSectionTracker:
        return self._tracker

    @property
    def active_id(self) -> str | None:
        return self._tracker.active_id

    @property
    def is_expanded(self) -> bool:
        return self._tracker.state.is_expanded

    @property
    def closed(self) -> bool:
        return self._tracker.is_disposed

    def render(self) -> str:
        """Render the navigation, or an empty string when there are no headings."""
        if not self._nodes or not self._tracker.refs:
            return ""
        state = self._tracker.state
        template = _jinja.get_template(_TEMPLATE_NAME)
        return template.render(
            headings=self._nodes,
            active_id=state.active_id,
            is_expanded=state.is_expanded,
            css=self._settings,
            content_id=self._content_id,
            list_only=False,
        )

    def handle_click(self, anchor: str, event: ClickEventProtocol) -> bool:
        """Replace the default hash jump with a programmatic smooth scroll."""
        event.prevent_default()
        if self.closed:
            return False
        return self._tracker.navigate_to(anchor)

    def toggle(self) -> bool:
        """Open or close the panel. Returns the new expansion state."""
        return self._tracker.toggle_expanded()

    def close(self) -> None:
        """Tear down: release observation; later updates are ignored."""
        self._tracker.dispose()
