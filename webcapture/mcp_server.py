"""MCP server exposing webcapture capture/extract tools."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Dict, Optional

from mcp.server.fastmcp import FastMCP

from .capture import capture_url, extract_from_url
from .config import CaptureConfig, VIEWS
from .pipeline import build_views

logger = logging.getLogger("webcapture.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="webcapture")


def _default_config() -> CaptureConfig:
    return CaptureConfig(output_root=Path(tempfile.gettempdir()))


@mcp.tool()
async def capture(
    url: str,
    view: str = "text",
) -> str:
    """Render a web page with Playwright and return its raw, rendered, text or outline view."""
    if view not in VIEWS:
        raise ValueError(f"Unknown view {view!r}; expected one of {', '.join(VIEWS)}")
    captured = await capture_url(url, _default_config())
    return build_views(captured)[view]


@mcp.tool()
async def extract(
    url: str,
    selectors: Dict[str, str],
) -> Dict[str, Optional[str]]:
    """Return the text of the first element matching each CSS selector, or null."""
    return await extract_from_url(url, selectors, _default_config())


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
