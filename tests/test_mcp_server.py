from __future__ import annotations

import asyncio

import pytest

from webcapture import mcp_server
from webcapture.models import CapturedPage


def test_capture_tool_returns_requested_view(monkeypatch) -> None:
    async def fake_capture(url, config):
        return CapturedPage(html="<body><p>From MCP</p></body>", source_url=url)

    monkeypatch.setattr(mcp_server, "capture_url", fake_capture)

    text = asyncio.run(mcp_server.capture("https://example.com"))
    raw = asyncio.run(mcp_server.capture("https://example.com", view="raw"))

    assert text == "From MCP"
    assert raw == "<body><p>From MCP</p></body>"


def test_capture_tool_rejects_unknown_view() -> None:
    with pytest.raises(ValueError, match="Unknown view"):
        asyncio.run(mcp_server.capture("https://example.com", view="pdf"))


def test_extract_tool_delegates(monkeypatch) -> None:
    async def fake_extract(url, selectors, config):
        return {name: None for name in selectors}

    monkeypatch.setattr(mcp_server, "extract_from_url", fake_extract)

    assert asyncio.run(mcp_server.extract("https://example.com", {"a": "h1"})) == {"a": None}
