"""Tests for converter/numbering.py."""

import pytest

from confluence2notion.converter.numbering import strip_numbering_artifacts


class TestStripNumberingArtifacts:
    @pytest.mark.parametrize("text, expected", [
        ("11、Overview", "Overview"),
        ("22.", ""),
        ("22.1. Scope", "Scope"),
        ("33.1.2、Details", "Details"),
        ("1.2.3.4. Deep", "Deep"),
        ("1.2.3、Three", "Three"),
        ("2.3. Rollout plan", "Rollout plan"),
        ("7、Seven", "Seven"),
        ("3[3、Setup](https://example.com)", "[Setup](https://example.com)"),
    ])
    def test_strips_known_patterns(self, text, expected):
        assert strip_numbering_artifacts(text) == expected

    @pytest.mark.parametrize("text", [
        "Plain item",
        "2024 roadmap",
        "Version 2.0 notes",
        "[Link](https://example.com)",
    ])
    def test_leaves_other_text_alone(self, text):
        assert strip_numbering_artifacts(text) == text

    def test_each_rule_applies_once(self):
        # Only the leading counter goes; the rules do not loop.
        assert strip_numbering_artifacts("1. 1. x") == "1. x"
