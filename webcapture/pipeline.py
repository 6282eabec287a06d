"""High-level orchestration for capturing pages and writing their views."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from playwright.async_api import async_playwright

from .capture import CaptureError, fetch_page
from .config import CaptureConfig
from .models import CapturedPage
from .reconstruct import reconstruct
from .text import page_title, render_text_outline
from .utils import build_output_dir

logger = logging.getLogger("webcapture")

VIEW_FILENAMES = {
    "raw": "raw.html",
    "rendered": "rendered.html",
    "text": "page.txt",
    "outline": "outline.html",
}


@dataclass
class CaptureResult:
    """Views and timing for a captured page."""

    url: str
    output_dir: Path
    views: Dict[str, str]
    total_seconds: float


def build_views(captured: CapturedPage) -> Dict[str, str]:
    """Produce every view of a captured page, keyed by view name."""
    reconstructed = reconstruct(captured)
    return {
        "raw": captured.html,
        "rendered": reconstructed.rendered_document,
        "text": reconstructed.plain_text,
        "outline": render_text_outline(captured.html),
    }


def save_views(
    captured: CapturedPage,
    output_root: Path,
    fallback_title: Optional[str] = None,
) -> Tuple[Path, Dict[str, str]]:
    """Write every view of ``captured`` into a per-page output directory."""
    views = build_views(captured)
    title = page_title(captured.html) or fallback_title
    output_dir = build_output_dir(output_root, captured.source_url or "", title)
    for view, filename in VIEW_FILENAMES.items():
        (output_dir / filename).write_text(views[view], encoding="utf-8")
    logger.info("Saved %d view(s) to %s", len(VIEW_FILENAMES), output_dir)
    return output_dir, views


def render_saved_page(
    html_path: Path,
    css_paths: Sequence[Path],
    output_root: Path,
) -> CaptureResult:
    """Reconstruct a page saved to disk without launching a browser."""
    start = time.perf_counter()
    captured = CapturedPage(
        html=html_path.read_text(encoding="utf-8"),
        styles=tuple(path.read_text(encoding="utf-8") for path in css_paths),
        source_url=html_path.resolve().as_uri(),
    )
    output_dir, views = save_views(captured, output_root, fallback_title=html_path.stem)
    return CaptureResult(
        url=captured.source_url,
        output_dir=output_dir,
        views=views,
        total_seconds=time.perf_counter() - start,
    )


async def run_capture(urls: Sequence[str], config: CaptureConfig) -> List[CaptureResult]:
    """Capture each URL sequentially; failed URLs are logged and skipped."""
    results: List[CaptureResult] = []
    async with async_playwright() as playwright:
        for url in urls:
            start = time.perf_counter()
            try:
                captured = await fetch_page(playwright, url, config)
            except CaptureError as exc:
                logger.error("Failed to capture %s: %s", url, exc)
                continue
            except Exception:  # pylint: disable=broad-except
                logger.exception("Unexpected error capturing %s", url)
                continue

            output_dir, views = save_views(captured, config.output_root)
            results.append(
                CaptureResult(
                    url=url,
                    output_dir=output_dir,
                    views=views,
                    total_seconds=time.perf_counter() - start,
                )
            )
    return results
