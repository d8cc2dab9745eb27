"""Shared test fixtures for the tocsync test suite."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import pytest
import structlog

from tocsync.environment import InMemoryEnvironment
from tocsync.flatten import flatten_headings
from tocsync.models.headings import HeadingNode
from tocsync.tracker import ActiveSectionTracker


@dataclass
class RecordingClickEvent:
    """Click event double that records ``prevent_default`` calls."""

    default_prevented: int = 0

    def prevent_default(self) -> None:
        self.default_prevented += 1


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo any structlog configuration a test (e.g. cli.main) applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture()
def sample_tree() -> list[dict]:
    """Two-level tree in the native {title, anchor, children} shape."""
    return [
        {
            "title": "Install",
            "anchor": "#install",
            "children": [
                {"title": "With pip", "anchor": "#with-pip", "children": []},
                {"title": "From source", "anchor": "#from-source", "children": []},
            ],
        },
        {"title": "Usage", "anchor": "#usage", "children": []},
        {
            "title": "Reference",
            "anchor": "#reference",
            "children": [{"title": "Options", "anchor": "#options", "children": []}],
        },
    ]


@pytest.fixture()
def mdx_tree() -> list[dict]:
    """The same page as exported by an MDX tableOfContents query (url/items)."""
    return [
        {
            "url": "#install",
            "title": "Install",
            "items": [
                {"url": "#with-pip", "title": "With pip"},
                {"url": "#from-source", "title": "From source"},
            ],
        },
        {"url": "#usage", "title": "Usage"},
        {"url": "#reference", "title": "Reference", "items": [{"url": "#options", "title": "Options"}]},
    ]


@pytest.fixture()
def sample_nodes(sample_tree: list[dict]) -> list[HeadingNode]:
    return [HeadingNode.model_validate(node) for node in sample_tree]


@pytest.fixture()
def environment(sample_tree: list[dict]) -> InMemoryEnvironment:
    """Page with an element for every heading in sample_tree."""
    return InMemoryEnvironment.with_elements(ref.id for ref in flatten_headings(sample_tree))


@pytest.fixture()
def tracker(environment: InMemoryEnvironment, sample_tree: list[dict]) -> ActiveSectionTracker:
    """Tracker already observing sample_tree."""
    tracker = ActiveSectionTracker(environment)
    tracker.update_headings(sample_tree)
    return tracker


@pytest.fixture()
def click() -> RecordingClickEvent:
    return RecordingClickEvent()
