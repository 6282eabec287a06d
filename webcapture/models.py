"""Data models passed between the capture adapter and the reconstruction pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from urllib.parse import quote

from .config import PLACEHOLDER_HOST

# Characters encodeURIComponent leaves alone, on top of quote()'s own set.
_LABEL_SAFE = "-_.!~*'()"

ExtractionResult = Dict[str, Optional[str]]


@dataclass(frozen=True)
class CapturedPage:
    """Serialized page HTML plus its CSS in discovery order."""

    html: str
    styles: Tuple[str, ...] = ()
    source_url: Optional[str] = None


@dataclass(frozen=True)
class ImageDescriptor:
    """Size and source classification of a single ``<img>`` element."""

    original_src: Optional[str]
    width: int
    height: int
    is_relative: bool
    is_missing: bool


@dataclass(frozen=True)
class Palette:
    background: str
    foreground: str


NEUTRAL_PALETTE = Palette("f0f0f0", "333333")
ALERT_PALETTE = Palette("f8d7da", "721c24")


@dataclass(frozen=True)
class PlaceholderSpec:
    """Size and caption of a generated placeholder image."""

    width: int
    height: int
    label: str

    def url(self, palette: Palette = NEUTRAL_PALETTE) -> str:
        """Build the placehold.co URL for this placeholder."""
        text = quote(self.label, safe=_LABEL_SAFE)
        return (
            f"{PLACEHOLDER_HOST}/{self.width}x{self.height}/"
            f"{palette.background}/{palette.foreground}?text={text}"
        )


@dataclass(frozen=True)
class ReconstructedPage:
    """Displayable views derived from a captured page."""

    rendered_document: str
    plain_text: str
