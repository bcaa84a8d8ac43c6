"""Shared test fixtures for the confluence2notion test suite."""

from __future__ import annotations

from typing import Any

import pytest

from confluence2notion.config import ExportConfig
from confluence2notion.converter.md_to_notion import MarkdownToNotionConverter
from confluence2notion.converter.notion_to_md import BlocksToMarkdownRenderer


class RecordingMetricsHook:
    """A metrics backend that records all calls for assertion."""

    def __init__(self) -> None:
        self.increments: list[dict[str, Any]] = []
        self.timings: list[dict[str, Any]] = []
        self.gauges: list[dict[str, Any]] = []

    def increment(self, name: str, value: int = 1, tags: dict[str, str] | None = None) -> None:
        self.increments.append({"name": name, "value": value, "tags": tags})

    def timing(self, name: str, ms: float, tags: dict[str, str] | None = None) -> None:
        self.timings.append({"name": name, "ms": ms, "tags": tags})

    def gauge(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        self.gauges.append({"name": name, "value": value, "tags": tags})

    def names(self, kind: str = "increments") -> list[str]:
        return [entry["name"] for entry in getattr(self, kind)]


@pytest.fixture
def config() -> ExportConfig:
    """Default test configuration with a dummy token."""
    return ExportConfig(token="test_token_1234")


@pytest.fixture
def metrics() -> RecordingMetricsHook:
    return RecordingMetricsHook()


@pytest.fixture
def converter(config: ExportConfig) -> MarkdownToNotionConverter:
    """Markdown-to-Notion converter using the default test config."""
    return MarkdownToNotionConverter(config)


@pytest.fixture
def renderer() -> BlocksToMarkdownRenderer:
    """Notion-to-Markdown renderer."""
    return BlocksToMarkdownRenderer()
