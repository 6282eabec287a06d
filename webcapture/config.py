"""Configuration objects and constants for page capture and reconstruction."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

PLACEHOLDER_HOST = "https://placehold.co"

# placehold.co only renders sizes within this range
MIN_IMAGE_SIDE = 10
MAX_IMAGE_SIDE = 4000
DEFAULT_IMAGE_WIDTH = 300
DEFAULT_IMAGE_HEIGHT = 200

VIEWS = ("raw", "rendered", "text", "outline")

# Builds the same tree as a browser DOMParser: implied <head>/<body>, content
# after </body> reparented into the body.
HTML_PARSER = "html5lib"


@dataclass
class CaptureConfig:
    """Top-level settings that control page capture and output."""

    output_root: Path
    wait_after_load: float = 1.0
    navigation_timeout: float = 30.0
    stylesheet_timeout: float = 15.0
    fetch_external_styles: bool = True
    user_agent: Optional[str] = None
