"""Utility helpers for string normalization and path handling."""

from __future__ import annotations

import re
from pathlib import Path
from urllib.parse import urlparse

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(value: str, fallback: str = "page") -> str:
    """Generate a filesystem-friendly slug using ASCII characters only."""
    normalized = value.encode("ascii", "ignore").decode("ascii")
    normalized = normalized.lower()
    normalized = SLUG_PATTERN.sub("-", normalized).strip("-")
    return normalized or fallback


def build_output_dir(output_root: Path, source_url: str, title: str | None) -> Path:
    """Create an output directory named after the page's domain and title."""
    parsed = urlparse(source_url)
    domain = slugify(parsed.netloc or "site", fallback="site")
    title_slug = slugify(title or "", fallback="")
    if not title_slug:
        title_slug = slugify(parsed.path or "page")
    output_dir = output_root / domain / title_slug[:80]
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir
