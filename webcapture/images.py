"""Placeholder substitution for relative and missing image sources."""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from bs4 import Tag

from .config import (
    DEFAULT_IMAGE_HEIGHT,
    DEFAULT_IMAGE_WIDTH,
    MAX_IMAGE_SIDE,
    MIN_IMAGE_SIDE,
    PLACEHOLDER_HOST,
)
from .models import ALERT_PALETTE, ImageDescriptor, PlaceholderSpec

logger = logging.getLogger("webcapture")

MISSING_SOURCE_LABEL = "No source"
LABEL_SOURCE_CHARS = 20

_LEADING_DIGITS = re.compile(r"\s*(\d+)")

# Executed by the viewer's browser if the placeholder itself cannot be loaded.
ONERROR_HANDLER = (
    "this.onerror=null; "
    f"const width = this.width || {DEFAULT_IMAGE_WIDTH}; "
    f"const height = this.height || {DEFAULT_IMAGE_HEIGHT}; "
    "const originalSrc = this.getAttribute('data-original-src') || this.src; "
    f"this.src = '{PLACEHOLDER_HOST}/' + width + 'x' + height + "
    f"'/{ALERT_PALETTE.background}/{ALERT_PALETTE.foreground}?text=Load+Error:+' + "
    "encodeURIComponent(originalSrc.substring(0, 15) + '...'); "
    "this.title = 'Failed to load: ' + originalSrc; "
    "this.classList.add('img-replaced');"
)


def parse_dimension(value: Optional[str]) -> int:
    """Read a width/height attribute like a browser does; 0 when unusable."""
    if value is None:
        return 0
    match = _LEADING_DIGITS.match(str(value))
    if not match:
        return 0
    return int(match.group(1))


def _clamp_side(value: int, default: int) -> int:
    if value < MIN_IMAGE_SIDE:
        value = default
    return min(max(value, MIN_IMAGE_SIDE), MAX_IMAGE_SIDE)


def is_absolute_source(src: str) -> bool:
    """Return True for sources the viewer can load without the original page."""
    return src.startswith("http") or src.startswith("data:")


def describe_image(img: Tag) -> ImageDescriptor:
    """Classify an ``<img>`` element and resolve its placeholder size."""
    src = img.get("src") or ""
    width = _clamp_side(parse_dimension(img.get("width")), DEFAULT_IMAGE_WIDTH)
    height = _clamp_side(parse_dimension(img.get("height")), DEFAULT_IMAGE_HEIGHT)
    return ImageDescriptor(
        original_src=src or None,
        width=width,
        height=height,
        is_relative=bool(src) and not is_absolute_source(src),
        is_missing=not src,
    )


def build_label(width: int, height: int, source: Optional[str] = None) -> str:
    """Caption shown on a placeholder; long sources are cut to 20 characters."""
    if not source:
        return f"Image:+{width}x{height}"
    excerpt = source[:LABEL_SOURCE_CHARS]
    if len(source) > LABEL_SOURCE_CHARS:
        excerpt += "..."
    return f"Image:+{width}x{height}+({excerpt})"


def placeholder_for(descriptor: ImageDescriptor) -> PlaceholderSpec:
    """Map an image descriptor to the placeholder that replaces it."""
    source = MISSING_SOURCE_LABEL if descriptor.is_missing else descriptor.original_src
    return PlaceholderSpec(
        width=descriptor.width,
        height=descriptor.height,
        label=build_label(descriptor.width, descriptor.height, source),
    )


def substitute_images(root: Tag) -> List[ImageDescriptor]:
    """Swap relative and missing image sources under ``root`` for placeholders.

    Absolute (``http``/``data:``) sources are kept. Every image receives the
    inline load-failure handler. Returns the descriptors of the images that
    were replaced, in document order.
    """
    images = root.find_all("img")
    replaced: List[ImageDescriptor] = []
    for img in images:
        descriptor = describe_image(img)
        if descriptor.is_relative:
            img["data-original-src"] = descriptor.original_src
            img["src"] = placeholder_for(descriptor).url()
            img["title"] = f"Original src: {descriptor.original_src}"
            replaced.append(descriptor)
        elif descriptor.is_missing:
            img["src"] = placeholder_for(descriptor).url()
            img["title"] = "Missing image source"
            replaced.append(descriptor)
        img["onerror"] = ONERROR_HANDLER

    logger.debug(
        "Replaced %d of %d image(s) with placeholders", len(replaced), len(images)
    )
    return replaced
