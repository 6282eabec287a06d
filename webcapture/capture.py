"""Playwright-backed capture of page HTML, stylesheets and selector fields."""

from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Sequence

import requests
from playwright.async_api import (
    Browser,
    Error as PlaywrightError,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from .config import CaptureConfig
from .extraction import SelectorError
from .models import CapturedPage, ExtractionResult

logger = logging.getLogger("webcapture")

STYLESHEET_DISCOVERY_SCRIPT = """() => ({
  externalStyles: Array.from(document.querySelectorAll('link[rel="stylesheet"]'))
    .map(link => link.href),
  inlineStyles: Array.from(document.querySelectorAll('style'))
    .map(style => style.innerHTML),
})"""


class CaptureError(RuntimeError):
    """The target page could not be loaded or read."""


async def _launch(playwright: Playwright) -> Browser:
    try:
        return await playwright.chromium.launch(headless=True)
    except PlaywrightError as exc:
        raise CaptureError(f"Could not launch browser: {exc}") from exc


async def _open_page(browser: Browser, url: str, config: CaptureConfig) -> Page:
    """Navigate a fresh page to ``url`` and wait for the network to settle."""
    options = {}
    if config.user_agent:
        options["user_agent"] = config.user_agent
    try:
        page = await browser.new_page(**options)
        page.set_default_navigation_timeout(config.navigation_timeout * 1000)
        logger.info("Loading %s", url)
        await page.goto(url, wait_until="networkidle")
        if config.wait_after_load:
            await page.wait_for_timeout(int(config.wait_after_load * 1000))
    except PlaywrightTimeoutError as exc:
        raise CaptureError(f"Timeout while loading {url}: {exc}") from exc
    except PlaywrightError as exc:
        raise CaptureError(f"Failed to load {url}: {exc}") from exc
    return page


def fetch_stylesheets(
    urls: Sequence[str],
    timeout: float,
    session: Optional[requests.Session] = None,
) -> List[str]:
    """Download external stylesheet bodies in link order, skipping failures."""
    if session is None:
        with requests.Session() as owned:
            return fetch_stylesheets(urls, timeout, session=owned)

    contents: List[str] = []
    for href in urls:
        if not href or href.startswith("data:"):
            continue
        try:
            resp = session.get(href, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Failed to fetch stylesheet %s: %s", href, exc)
            continue

        if "charset" not in resp.headers.get("Content-Type", "").lower():
            resp.encoding = "utf-8"
        if not resp.text:
            logger.debug("Skipping empty stylesheet %s", href)
            continue
        contents.append(resp.text)
    return contents


async def fetch_page(
    playwright: Playwright,
    url: str,
    config: CaptureConfig,
    session: Optional[requests.Session] = None,
) -> CapturedPage:
    """Render ``url`` and return its HTML with inline and external CSS."""
    browser = await _launch(playwright)
    try:
        page = await _open_page(browser, url, config)
        try:
            html = await page.content()
            discovered = await page.evaluate(STYLESHEET_DISCOVERY_SCRIPT)
        except PlaywrightError as exc:
            raise CaptureError(f"Failed to read {url}: {exc}") from exc
        final_url = page.url
    finally:
        await browser.close()

    styles = list(discovered.get("inlineStyles") or [])
    external = discovered.get("externalStyles") or []
    if config.fetch_external_styles and external:
        styles.extend(fetch_stylesheets(external, config.stylesheet_timeout, session))
    logger.debug(
        "Captured %d character(s) of HTML and %d stylesheet(s) from %s",
        len(html),
        len(styles),
        final_url,
    )
    return CapturedPage(html=html, styles=tuple(styles), source_url=final_url)


async def _query_text(page: Page, selector: str) -> Optional[str]:
    try:
        element = await page.query_selector(selector)
        if element is None:
            return None
        return await element.text_content()
    except PlaywrightError as exc:
        raise SelectorError(f"{selector!r}: {exc}") from exc


async def extract_fields(
    playwright: Playwright,
    url: str,
    selectors: Mapping[str, str],
    config: CaptureConfig,
) -> ExtractionResult:
    """Read the text of the first match of each selector in the live page."""
    browser = await _launch(playwright)
    try:
        page = await _open_page(browser, url, config)
        result: ExtractionResult = {}
        for name, selector in selectors.items():
            try:
                result[name] = await _query_text(page, selector)
            except SelectorError as exc:
                logger.warning("Error extracting %s with selector %s: %s", name, selector, exc)
                result[name] = None
    finally:
        await browser.close()
    return result


async def capture_url(url: str, config: CaptureConfig) -> CapturedPage:
    """Capture a single page in its own Playwright session."""
    async with async_playwright() as playwright:
        return await fetch_page(playwright, url, config)


async def extract_from_url(
    url: str,
    selectors: Mapping[str, str],
    config: CaptureConfig,
) -> ExtractionResult:
    """Run field extraction against a single page in its own Playwright session."""
    async with async_playwright() as playwright:
        return await extract_fields(playwright, url, selectors, config)
