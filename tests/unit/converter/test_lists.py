"""Tests for converter/lists.py: list runs to nested list blocks."""

from __future__ import annotations

import pytest

from confluence2notion.converter.lists import (
    build_list,
    collect_items,
    fold_items,
    item_text,
    match_list_item,
)
from confluence2notion.models import ListItem, ListKind


def _text(block: dict) -> str:
    data = block[block["type"]]
    return "".join(seg["text"]["content"] for seg in data["rich_text"])


def _children(block: dict) -> list[dict]:
    return block[block["type"]].get("children", [])


# =========================================================================
# match_list_item
# =========================================================================


class TestMatchListItem:
    def test_bullet_markers(self):
        for marker in "-*+":
            entry = match_list_item(f"{marker} item")
            assert entry.kind is ListKind.BULLET
            assert entry.content == "item"

    def test_numbered(self):
        entry = match_list_item("  12. twelve")
        assert entry.kind is ListKind.NUMBER
        assert entry.indent == 2
        assert entry.content == "twelve"

    def test_task_checked_and_unchecked(self):
        assert match_list_item("- [x] done").checked is True
        assert match_list_item("- [X] done").checked is True
        assert match_list_item("- [ ] todo").checked is False
        assert match_list_item("- [ ] todo").kind is ListKind.TASK

    def test_tab_counts_as_four_columns(self):
        assert match_list_item("\t- x").indent == 4

    @pytest.mark.parametrize("line", ["plain", "-no space", "1.no space", "---"])
    def test_non_items(self, line):
        assert match_list_item(line) is None


# =========================================================================
# collect / fold
# =========================================================================


class TestCollectAndFold:
    def test_levels_relative_to_first_item(self):
        lines = ["  - a", "    - b", "  - c"]
        items, next_index = collect_items(lines, 0)
        assert [i.level for i in items] == [0, 1, 0]
        assert next_index == 3

    def test_outdent_below_base_clamps_to_zero(self):
        lines = ["    - a", "  - b"]
        items, _ = collect_items(lines, 0)
        assert [i.level for i in items] == [0, 0]

    def test_blank_line_between_items_continues(self):
        items, next_index = collect_items(["- a", "", "- b"], 0)
        assert [i.content for i in items] == ["a", "b"]
        assert next_index == 3

    def test_blank_line_before_paragraph_ends_run(self):
        items, next_index = collect_items(["- a", "", "Para"], 0)
        assert len(items) == 1
        assert next_index == 1

    def test_different_kind_at_top_level_ends_run(self):
        items, next_index = collect_items(["- a", "1. b"], 0)
        assert len(items) == 1
        assert next_index == 1

    def test_different_kind_nested_is_kept(self):
        items, _ = collect_items(["- a", "  1. b"], 0)
        assert [i.kind for i in items] == [ListKind.BULLET, ListKind.NUMBER]

    def test_not_a_list_item_raises(self):
        with pytest.raises(ValueError, match="not a list item"):
            collect_items(["para"], 0)

    def test_fold_builds_tree(self):
        items = [
            ListItem(ListKind.BULLET, "a", 0, 0),
            ListItem(ListKind.BULLET, "b", 2, 1),
            ListItem(ListKind.BULLET, "c", 4, 2),
            ListItem(ListKind.BULLET, "d", 0, 0),
        ]
        roots = fold_items(items)
        assert [r.content for r in roots] == ["a", "d"]
        assert roots[0].children[0].content == "b"
        assert roots[0].children[0].children[0].content == "c"

    def test_skipped_level_attaches_to_nearest_shallower(self):
        items = [
            ListItem(ListKind.BULLET, "a", 0, 0),
            ListItem(ListKind.BULLET, "b", 4, 2),
        ]
        roots = fold_items(items)
        assert roots[0].children[0].content == "b"


# =========================================================================
# build_list
# =========================================================================


class TestBuildList:
    def test_flat_bullets(self):
        result = build_list(["- a", "- b", "after"], 0)
        assert [b["type"] for b in result.blocks] == ["bulleted_list_item"] * 2
        assert result.next_index == 2

    def test_task_items_carry_checked(self):
        result = build_list(["- [x] done", "- [ ] todo"], 0)
        assert [b["to_do"]["checked"] for b in result.blocks] == [True, False]

    def test_bullets_have_no_checked_field(self):
        result = build_list(["- a"], 0)
        assert "checked" not in result.blocks[0]["bulleted_list_item"]

    def test_two_levels_nest_natively(self):
        result = build_list(["- a", "  - b"], 0)
        [top] = result.blocks
        assert [_text(c) for c in _children(top)] == ["b"]

    def test_five_levels_flatten_below_third(self):
        lines = [
            "- a",
            "  - b",
            "    - c",
            "      - d",
            "        - e",
        ]
        result = build_list(lines, 0)
        [a] = result.blocks
        [b] = _children(a)
        assert _text(b) == "b"
        under_b = _children(b)
        assert [_text(x) for x in under_b] == ["c", "[ind4] d", "[ind5] e"]
        # Depth-two items never carry children.
        assert all("children" not in x["bulleted_list_item"] for x in under_b)

    def test_flattened_siblings_keep_document_order(self):
        lines = ["- a", "  - b", "    - c", "      - d", "    - e"]
        [a] = build_list(lines, 0).blocks
        [b] = _children(a)
        assert [_text(x) for x in _children(b)] == ["c", "[ind4] d", "e"]

    def test_native_depth_zero_flattens_everything(self):
        result = build_list(["- a", "  - b"], 0, native_depth=0)
        assert [_text(b) for b in result.blocks] == ["a", "b"]
        assert "children" not in result.blocks[0]["bulleted_list_item"]

    def test_numbering_artifacts_stripped(self):
        result = build_list(["1. 11、Intro", "2. 22.1. Scope"], 0)
        assert [_text(b) for b in result.blocks] == ["Intro", "Scope"]

    def test_numbering_kept_when_disabled(self):
        result = build_list(["1. 11、Intro"], 0, strip_numbering=False)
        assert _text(result.blocks[0]) == "11、Intro"

    def test_inline_formatting_in_items(self):
        result = build_list(["- **bold** item"], 0)
        segs = result.blocks[0]["bulleted_list_item"]["rich_text"]
        assert segs[0]["annotations"]["bold"] is True

    def test_item_text_marker_only_from_depth_three(self):
        item = ListItem(ListKind.BULLET, "x", 0, 0)
        assert item_text(item, 2) == "x"
        assert item_text(item, 3) == "[ind4] x"
