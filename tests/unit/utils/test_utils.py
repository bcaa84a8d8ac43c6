"""Tests for utility functions.

Tests for: chunk_children, split_string, redact, extract_page_id.
"""

import pytest

from confluence2notion.errors import ExportValidationError
from confluence2notion.utils.chunk import chunk_children
from confluence2notion.utils.page_id import extract_page_id, format_page_id
from confluence2notion.utils.redact import redact
from confluence2notion.utils.text_split import split_string, utf16_len

# =========================================================================
# chunk_children tests
# =========================================================================

class TestChunkChildren:
    def test_empty_list(self):
        assert chunk_children([]) == []

    def test_under_limit(self):
        result = chunk_children([{"type": "paragraph"}] * 50)
        assert [len(b) for b in result] == [50]

    def test_exact_limit(self):
        assert [len(b) for b in chunk_children([{"type": "divider"}] * 100)] == [100]

    def test_over_limit(self):
        assert [len(b) for b in chunk_children([{"type": "divider"}] * 250)] == [100, 100, 50]

    def test_order_preserved(self):
        blocks = [{"i": i} for i in range(7)]
        flat = [b for batch in chunk_children(blocks, size=3) for b in batch]
        assert flat == blocks

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            chunk_children([{"type": "divider"}], size=0)


# =========================================================================
# split_string tests
# =========================================================================

class TestSplitString:
    def test_short(self):
        assert split_string("abc") == ["abc"]

    def test_empty(self):
        assert split_string("") == []

    def test_split_at_limit(self):
        assert [len(p) for p in split_string("x" * 4001)] == [2000, 2000, 1]

    def test_multibyte_characters_counted_once(self):
        text = "中" * 2001
        assert [len(p) for p in split_string(text)] == [2000, 1]

    def test_astral_characters_count_as_two_units(self):
        pieces = split_string("\U0001f600" * 1001)
        assert [utf16_len(p) for p in pieces] == [2000, 2]

    def test_pair_is_not_cut_at_boundary(self):
        assert split_string("ab\U0001f600cd", 3) == ["ab", "\U0001f600c", "d"]

    def test_single_astral_character_with_limit_one(self):
        assert split_string("\U0001f600x", 1) == ["\U0001f600", "x"]

    def test_utf16_len(self):
        assert utf16_len("") == 0
        assert utf16_len("中") == 1
        assert utf16_len("a\U00020000") == 3

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            split_string("abc", limit=0)


# =========================================================================
# redact tests
# =========================================================================

class TestRedact:
    def test_authorization_header(self):
        assert redact({"Authorization": "Bearer secret_abcdefgh"}) == {
            "Authorization": "Bearer <redacted>",
        }

    def test_token_removed_everywhere(self):
        token = "secret_abcdefgh1234"
        out = redact({"a": [f"x {token} y"], "b": {"c": token}}, token)
        assert out == {
            "a": ["x <redacted:...1234> y"],
            "b": {"c": "<redacted:...1234>"},
        }

    def test_sensitive_non_string_value(self):
        assert redact({"api_key": 12345}) == {"api_key": "<redacted>"}

    def test_data_uri_collapsed(self):
        uri = "data:image/png;base64," + "A" * 100
        out = redact({"src": uri})
        assert out == {"src": f"<data_uri:{len(uri)}_chars>"}

    def test_input_not_mutated(self):
        payload = {"token": "abc", "nested": {"x": 1}}
        redact(payload)
        assert payload == {"token": "abc", "nested": {"x": 1}}


# =========================================================================
# Page ids
# =========================================================================

HEX = "2dadca9a3fff80278295e23720dd2a53"
DASHED = "2dadca9a-3fff-8027-8295-e23720dd2a53"


class TestExtractPageId:
    @pytest.mark.parametrize("value", [
        HEX,
        DASHED,
        HEX.upper(),
        f"  {HEX}  ",
        f"https://www.notion.so/{HEX}",
        f"https://www.notion.so/Team-Notes-{HEX}",
        f"https://www.notion.so/workspace/Team-Notes-{HEX}?pvs=4",
        f"https://www.notion.so/Team-Notes-{HEX}/",
    ])
    def test_accepted(self, value):
        assert extract_page_id(value) == DASHED

    @pytest.mark.parametrize("value", [
        "",
        "not-an-id",
        HEX[:-1],
        "https://www.notion.so/Team-Notes",
        "https://wiki.example.com/display/SP/Home",
    ])
    def test_rejected(self, value):
        with pytest.raises(ExportValidationError) as exc_info:
            extract_page_id(value)
        assert exc_info.value.context["field"] == "parent_id"

    def test_format_page_id(self):
        assert format_page_id(HEX.upper()) == DASHED
