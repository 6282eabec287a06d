"""Selector-based field extraction over captured HTML."""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from bs4 import BeautifulSoup
from soupsieve import SelectorSyntaxError

from .config import HTML_PARSER
from .models import ExtractionResult

logger = logging.getLogger("webcapture")


class SelectorError(Exception):
    """A single field's selector could not be evaluated."""


def select_field(soup: BeautifulSoup, selector: str) -> Optional[str]:
    """Return the text of the first element matching ``selector``, if any."""
    try:
        element = soup.select_one(selector)
    except (SelectorSyntaxError, NotImplementedError, ValueError) as exc:
        raise SelectorError(f"invalid selector {selector!r}: {exc}") from exc
    if element is None:
        return None
    return element.get_text()


def select_fields(html: str, selectors: Mapping[str, str]) -> ExtractionResult:
    """Evaluate each selector independently; failures yield ``None`` for that field."""
    soup = BeautifulSoup(html, HTML_PARSER)
    result: ExtractionResult = {}
    for name, selector in selectors.items():
        try:
            result[name] = select_field(soup, selector)
        except SelectorError as exc:
            logger.warning("Error extracting %s with selector %s: %s", name, selector, exc)
            result[name] = None
    return result
