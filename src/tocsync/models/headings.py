from __future__ import annotations

from dataclasses import dataclass

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


def anchor_to_id(anchor: str | None) -> str:
    """Strip the leading fragment marker: ``"#install"`` → ``"install"``."""
    if not anchor:
        return ""
    return anchor[1:] if anchor.startswith("#") else anchor


class HeadingNode(BaseModel):
    """A heading in the page's table of contents.

    Accepts both the native shape (``anchor`` / ``children``) and the MDX
    ``tableOfContents`` shape (``url`` / ``items``). MDX emits a wrapper item
    with no ``url`` or ``title`` when a post skips a heading level; such an
    item only groups its children.
    """

    title: str = ""
    anchor: str = Field(default="", validation_alias=AliasChoices("anchor", "url"))
    children: list[HeadingNode] = Field(
        default_factory=list,
        validation_alias=AliasChoices("children", "items"),
    )

    @property
    def id(self) -> str:
        return anchor_to_id(self.anchor)


class FlatHeadingRef(BaseModel):
    """Observation target derived from a HeadingNode."""

    model_config = ConfigDict(frozen=True)

    id: str  # DOM lookup key, anchor without "#"
    anchor: str  # Original anchor, used for href / navigation


@dataclass(frozen=True)
class VisibilityEntry:
    """One visibility crossing delivered by the environment."""

    target_id: str
    is_intersecting: bool
