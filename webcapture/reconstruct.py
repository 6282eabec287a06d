"""Reassemble captured HTML and CSS into a self-contained, displayable document."""

from __future__ import annotations

import logging
from typing import Sequence, Tuple

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from .config import HTML_PARSER
from .images import substitute_images
from .models import CapturedPage, ReconstructedPage
from .text import extract_plain_text

logger = logging.getLogger("webcapture")

INJECTED_STYLESHEET = """<style>
img {
  max-width: 100%;
  height: auto;
  border: 1px solid #eee;
  padding: 2px;
  margin: 5px;
}
img[data-original-src] {
  border: 1px dashed #ff9800;
}
img:hover {
  box-shadow: 0 0 5px rgba(0,0,0,0.3);
}
.img-replaced {
  position: relative;
}
.img-replaced::before {
  content: "\\26A0";
  position: absolute;
  top: 0;
  left: 0;
  background: rgba(255, 152, 0, 0.7);
  color: white;
  padding: 2px 6px;
  font-size: 10px;
  border-radius: 3px;
}
</style>"""

NOTICE_BANNER = (
    '<div class="image-notice" style="background: #fff8e1; padding: 10px; '
    'margin-bottom: 15px; border-left: 4px solid #ff9800; color: #333;">'
    "<strong>Note about images:</strong> some images were replaced with "
    "placeholders of the same size as the originals because their sources "
    "were relative or could not be loaded."
    "</div>"
)

REVEAL_SCRIPT = """<script>
document.querySelectorAll('img[data-original-src]').forEach(img => {
  img.classList.add('img-replaced');
  img.addEventListener('click', function() {
    alert('Original image source: ' + this.getAttribute('data-original-src'));
  });
});
</script>"""


def _rebuild_regions(html: str) -> Tuple[str, str]:
    """Return the head and body inner HTML, with body images substituted."""
    try:
        soup = BeautifulSoup(html, HTML_PARSER)
    except ParserRejectedMarkup as exc:
        logger.warning("Could not parse captured HTML, embedding it as-is: %s", exc)
        return "", html

    # The tree builder always supplies <head>; <body> is only absent for
    # frameset documents, which are embedded whole.
    head_content = soup.head.decode_contents() if soup.head is not None else ""
    if soup.body is None:
        substitute_images(soup)
        return head_content, soup.decode_contents()
    substitute_images(soup.body)
    return head_content, soup.body.decode_contents()


def render_document(html: str, styles: Sequence[str] = ()) -> str:
    """Build the self-contained document shown in the rendered view."""
    head_content, body_content = _rebuild_regions(html)

    parts = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="UTF-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
        INJECTED_STYLESHEET,
    ]
    parts.extend(f"<style>{style}</style>" for style in styles)
    parts.extend(
        [
            head_content,
            "</head>",
            "<body>",
            NOTICE_BANNER,
            body_content,
            REVEAL_SCRIPT,
            "</body>",
            "</html>",
        ]
    )
    return "\n".join(parts) + "\n"


def reconstruct(captured: CapturedPage) -> ReconstructedPage:
    """Produce the rendered document and plain text for a captured page."""
    return ReconstructedPage(
        rendered_document=render_document(captured.html, captured.styles),
        plain_text=extract_plain_text(captured.html),
    )
