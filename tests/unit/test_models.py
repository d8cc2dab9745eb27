"""Unit tests for heading models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tocsync.models.headings import FlatHeadingRef, HeadingNode, anchor_to_id


class TestAnchorToId:
    def test_strips_hash(self) -> None:
        assert anchor_to_id("#install") == "install"

    def test_only_leading_hash(self) -> None:
        assert anchor_to_id("#c#-tips") == "c#-tips"

    def test_without_hash(self) -> None:
        assert anchor_to_id("install") == "install"

    @pytest.mark.parametrize("anchor", [None, "", "#"])
    def test_empty(self, anchor: str | None) -> None:
        assert anchor_to_id(anchor) == ""


class TestHeadingNode:
    def test_native_shape(self) -> None:
        node = HeadingNode.model_validate(
            {"title": "A", "anchor": "#a", "children": [{"title": "B", "anchor": "#b"}]}
        )
        assert node.id == "a"
        assert node.children[0].id == "b"

    def test_mdx_shape(self) -> None:
        node = HeadingNode.model_validate(
            {"title": "A", "url": "#a", "items": [{"title": "B", "url": "#b"}]}
        )
        assert node.anchor == "#a"
        assert [child.anchor for child in node.children] == ["#b"]

    def test_keyword_construction(self) -> None:
        node = HeadingNode(title="A", anchor="#a")
        assert node.children == []

    def test_wrapper_item_without_url(self) -> None:
        node = HeadingNode.model_validate({"items": [{"url": "#a", "title": "A"}]})
        assert node.title == ""
        assert node.anchor == ""
        assert node.id == ""
        assert node.children == [HeadingNode(title="A", anchor="#a")]

    def test_non_string_anchor_rejected(self) -> None:
        with pytest.raises(ValidationError):
            HeadingNode.model_validate({"title": "A", "anchor": ["#a"]})

    def test_value_equality(self) -> None:
        assert HeadingNode(title="A", anchor="#a") == HeadingNode.model_validate({"title": "A", "url": "#a"})


class TestFlatHeadingRef:
    def test_frozen(self) -> None:
        ref = FlatHeadingRef(id="a", anchor="#a")
        with pytest.raises(ValidationError):
            ref.id = "b"

    def test_hashable(self) -> None:
        assert len({FlatHeadingRef(id="a", anchor="#a"), FlatHeadingRef(id="a", anchor="#a")}) == 1
