"""Plain-text and outline views of captured HTML."""

from __future__ import annotations

import logging
from html import escape
from typing import List, Optional

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup

from .config import HTML_PARSER

logger = logging.getLogger("webcapture")

# Elements that only add noise to the text view. The anchor, button and footer
# image rules target artifacts of the e-GP procurement portal.
NOISE_SELECTORS = (
    "meta",
    'a[onclick="ChkRet_nosess();"]',
    "input.btnCommon",
    'img[src="/egp2procmainWeb/images/pagefooter.gif"]',
    "script",
    "style",
)

OUTLINE_STRIP_TAGS = ["script", "style", "meta", "link"]
OUTLINE_SKIP_CHILDREN = {"script", "style", "meta", "link", "svg", "path", "img"}
OUTLINE_SELECTOR = (
    "h1, h2, h3, h4, h5, h6, p, div, section, article, main, header, footer, aside, nav"
)

_OUTLINE_HEADER = (
    '<div style="font-family: sans-serif;">\n'
    '<div style="background-color: #f0f0f0; padding: 10px; margin-bottom: 15px; '
    'border-radius: 4px;">\n'
    '<h2 style="margin: 0; color: #333;">Text from the page</h2>\n'
    '<p style="margin: 5px 0 0; font-size: 12px; color: #666;">'
    "Text extracted from the HTML, one block per element.</p>\n"
    "</div>\n"
)

_OUTLINE_BLOCK = (
    '<div class="extracted-text {tag}-text" style="margin-bottom: 10px; '
    'padding: 8px; border-left: 3px solid #007bff;">\n'
    '<span style="font-size: 10px; color: #666; display: block; '
    'margin-bottom: 4px;">{tag}</span>\n'
    '<div style="font-size: 14px;">{text}</div>\n'
    "</div>\n"
)


def _parse(html: str) -> Optional[BeautifulSoup]:
    try:
        return BeautifulSoup(html, HTML_PARSER)
    except ParserRejectedMarkup as exc:
        logger.warning("Could not parse captured HTML: %s", exc)
        return None


def _text_root(soup: BeautifulSoup) -> Tag:
    """Return ``<body>``, which holds everything outside the head once parsed."""
    if soup.body is not None:
        return soup.body
    return soup


def remove_noise(soup: BeautifulSoup) -> int:
    """Drop every element matched by ``NOISE_SELECTORS``; returns the count."""
    removed = 0
    for selector in NOISE_SELECTORS:
        for tag in soup.select(selector):
            if tag.decomposed:
                continue
            tag.decompose()
            removed += 1
    return removed


def clean_text(text: str) -> str:
    """Trim lines, drop tabs and blank lines."""
    lines = text.strip().replace("\t", "").split("\n")
    return "\n".join(line.strip() for line in lines if line.strip())


def extract_plain_text(html: str) -> str:
    """Return the de-noised text content of the page body."""
    soup = _parse(html)
    if soup is None:
        return ""
    removed = remove_noise(soup)
    logger.debug("Removed %d noise element(s) before text extraction", removed)
    return clean_text(_text_root(soup).get_text())


def page_title(html: str) -> Optional[str]:
    """Return the stripped ``<title>`` text, if any."""
    soup = _parse(html)
    if soup is None or soup.title is None:
        return None
    return soup.title.get_text().strip() or None


def _outline_element(element: Tag, blocks: List[str]) -> None:
    text = element.get_text().strip()
    if text:
        tag = "body" if isinstance(element, BeautifulSoup) else element.name
        blocks.append(_OUTLINE_BLOCK.format(tag=tag, text=escape(text)))
    for child in element.find_all(recursive=False):
        if child.name in OUTLINE_SKIP_CHILDREN:
            continue
        _outline_element(child, blocks)


def render_text_outline(html: str) -> str:
    """Render an HTML listing of the text held by each structural element.

    Only outermost structural elements start a walk; each walk emits a block
    for the element and for every descendant that carries text, so nested
    text appears once per enclosing element.
    """
    soup = _parse(html)
    if soup is None:
        return ""
    for tag in soup(OUTLINE_STRIP_TAGS):
        tag.decompose()
    root = _text_root(soup)

    blocks: List[str] = []
    important = root.select(OUTLINE_SELECTOR)
    if not important:
        _outline_element(root, blocks)
    else:
        important_ids = {id(element) for element in important}
        for element in important:
            if any(id(parent) in important_ids for parent in element.parents):
                continue
            _outline_element(element, blocks)
    return _OUTLINE_HEADER + "".join(blocks) + "</div>\n"
