"""Heading tree extraction for Markdown and MDX posts.

Single-pass algorithm that extracts ATX headings, suppressing headings inside
fenced code blocks, and nests them by level into HeadingNode trees. Anchors
use GitHub-style slugs, the same ids the page renderer stamps onto heading
elements, with ``-1``, ``-2`` suffixes for repeated titles.
"""

from __future__ import annotations

import re

from tocsync.models.headings import HeadingNode

_HEADING_RE = re.compile(r"^ {0,3}(#{1,6})[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$")

_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\([^)]*\)")
_LINK_RE = re.compile(r"\[([^\]]*)\]\([^)]*\)")
_CODE_RE = re.compile(r"`([^`]*)`")
_EMPHASIS_RE = re.compile(r"(\*\*|\*|~~)(.+?)\1")
_UNDERSCORE_EMPHASIS_RE = re.compile(r"(?<!\w)(__|_)(.+?)\1(?!\w)")
_TAG_RE = re.compile(r"<[^>]+>")
_SLUG_STRIP_RE = re.compile(r"[^\w\- ]")


def strip_inline_markup(text: str) -> str:
    """Reduce inline Markdown to its visible text."""
    text = _IMAGE_RE.sub(r"\1", text)
    text = _LINK_RE.sub(r"\1", text)
    text = _CODE_RE.sub(r"\1", text)
    text = _EMPHASIS_RE.sub(r"\2", text)
    text = _UNDERSCORE_EMPHASIS_RE.sub(r"\2", text)
    text = _TAG_RE.sub("", text)
    return text.strip()


def slugify(title: str) -> str:
    """GitHub-style slug: lowercase, punctuation dropped, spaces → hyphens.

    Unicode letters survive; runs of spaces are not collapsed.
    """
    return _SLUG_STRIP_RE.sub("", title.lower()).replace(" ", "-")


class Slugger:
    """Hands out unique slugs within one document."""

    def __init__(self) -> None:
        self._occurrences: dict[str, int] = {}

    def slug(self, title: str) -> str:
        base = slugify(title)
        slug = base
        while slug in self._occurrences:
            self._occurrences[base] += 1
            slug = f"{base}-{self._occurrences[base]}"
        self._occurrences[slug] = 0
        return slug

    def reset(self) -> None:
        self._occurrences.clear()


def parse_heading_tree(
    content: str,
    *,
    min_depth: int = 2,
    max_depth: int = 4,
) -> list[HeadingNode]:
    """Extract the nested heading tree from Markdown/MDX content.

    Every heading takes part in slug de-duplication, but only levels within
    ``min_depth..max_depth`` appear in the tree. A heading nests under the
    closest preceding heading of a shallower level; if there is none it
    becomes a root.
    """
    roots: list[HeadingNode] = []
    stack: list[tuple[int, HeadingNode]] = []
    slugger = Slugger()

    in_code_block = False
    fence: str | None = None

    for line in content.splitlines():
        stripped = line.strip()

        # Rule 1: code block tracking
        if stripped.startswith("```") or stripped.startswith("~~~"):
            current_fence = stripped[:3]
            if not in_code_block:
                in_code_block = True
                fence = current_fence
            elif current_fence == fence:
                in_code_block = False
                fence = None
            continue

        if in_code_block:
            continue

        # Rule 2: heading detection
        match = _HEADING_RE.match(line)
        if not match:
            continue

        level = len(match.group(1))
        title = strip_inline_markup(match.group(2))
        if not title:
            continue
        anchor = f"#{slugger.slug(title)}"

        if level < min_depth or level > max_depth:
            continue

        node = HeadingNode(title=title, anchor=anchor)
        while stack and stack[-1][0] >= level:
            stack.pop()
        if stack:
            stack[-1][1].children.append(node)
        else:
            roots.append(node)
        stack.append((level, node))

    return roots
