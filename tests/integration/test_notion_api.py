"""Integration tests for the Notion API.

These tests require a real Notion API token and a parent page shared with
the integration. Set NOTION_TOKEN and NOTION_TEST_PAGE_ID to run them.

Usage:
    NOTION_TOKEN=ntn_xxx NOTION_TEST_PAGE_ID=xxx pytest tests/integration/ -v
"""
import os

import pytest

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not os.environ.get("NOTION_TOKEN"),
        reason="NOTION_TOKEN not set; skipping integration tests",
    ),
]


@pytest.fixture
def token():
    return os.environ["NOTION_TOKEN"]


@pytest.fixture
def page_id():
    pid = os.environ.get("NOTION_TEST_PAGE_ID")
    if not pid:
        pytest.skip("NOTION_TEST_PAGE_ID not set")
    return pid


@pytest.fixture
async def client(token):
    from confluence2notion import AsyncExportClient
    async with AsyncExportClient(token=token) as c:
        yield c


class TestCreatePage:
    """Integration tests for page creation."""

    async def test_create_page_from_markdown(self, client, page_id):
        result = await client.create_page_from_markdown(
            parent_id=page_id,
            title="Integration Test Page",
            markdown="# Test\n\nHello from confluence2notion integration tests.",
        )
        assert result.page_id
        assert result.url
        assert result.blocks_created == 2

    async def test_create_page_from_html(self, client, page_id):
        html = (
            "<h2>Checklist</h2>"
            "<ul><li>Backup</li><li>Deploy</li></ul>"
            '<blockquote data-panel-type="info"><p>Imported page</p></blockquote>'
            '<pre><code class="language-python">print("hello")</code></pre>'
        )
        result = await client.create_page_from_html(
            parent_id=page_id,
            title="HTML Integration Test",
            html=html,
            source_url="https://wiki.example.com/display/QA/Checklist",
        )
        assert result.blocks_created == 6

    async def test_large_page_is_batched(self, client, page_id):
        markdown = "\n\n".join(f"Paragraph {i}" for i in range(130))
        result = await client.create_page_from_markdown(
            parent_id=page_id,
            title="Batched Integration Test",
            markdown=markdown,
        )
        assert result.blocks_created == 130


class TestErrorHandling:
    """Integration tests for error handling."""

    async def test_unshared_parent_raises_permission_error(self, client):
        from confluence2notion import ExportPermissionError
        with pytest.raises(ExportPermissionError):
            await client.create_page_from_markdown(
                parent_id="00000000-0000-0000-0000-000000000000",
                title="Should fail",
                markdown="x",
            )

    async def test_invalid_token_raises(self, page_id):
        from confluence2notion import AsyncExportClient, ExportAuthError
        async with AsyncExportClient(token="ntn_invalid_token") as c:
            with pytest.raises(ExportAuthError):
                await c.create_page_from_markdown(parent_id=page_id, title="x", markdown="x")
