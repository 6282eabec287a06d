"""Command-line entry point for webcapture."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import time
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from .capture import CaptureError, extract_from_url
from .config import CaptureConfig, VIEWS
from .extraction import select_fields
from .pipeline import CaptureResult, render_saved_page, run_capture

logger = logging.getLogger("webcapture.cli")


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or first.startswith("-"):
        return argv
    return ("capture", *argv)


def _selector_pair(value: str) -> Tuple[str, str]:
    name, sep, selector = value.partition("=")
    name, selector = name.strip(), selector.strip()
    if not sep or not name or not selector:
        raise argparse.ArgumentTypeError(
            f"expected NAME=CSS_SELECTOR, got {value!r}"
        )
    return name, selector


def _add_browser_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--wait",
        type=float,
        default=1.0,
        help="Seconds to wait after network idle before reading HTML",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Navigation timeout in seconds",
    )
    parser.add_argument(
        "--user-agent",
        default=None,
        help="Override the browser User-Agent header",
    )


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output",
        default="output",
        type=Path,
        help="Directory where captured views should be written",
    )
    parser.add_argument(
        "--print",
        dest="print_view",
        choices=VIEWS,
        default=None,
        help="Also write the chosen view of each page to STDOUT",
    )


def _add_verbose_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Capture web pages via Playwright and rebuild them as raw, rendered, "
            "plain-text and outline views."
        ),
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    capture_parser = subparsers.add_parser(
        "capture", help="Render web pages and write their views"
    )
    capture_parser.add_argument("urls", nargs="+", help="One or more URLs to capture")
    _add_output_arguments(capture_parser)
    _add_browser_arguments(capture_parser)
    capture_parser.add_argument(
        "--stylesheet-timeout",
        type=float,
        default=15.0,
        help="Timeout in seconds for each external stylesheet download",
    )
    capture_parser.add_argument(
        "--no-external-styles",
        action="store_true",
        help="Keep inline <style> blocks only; skip linked stylesheets",
    )
    _add_verbose_argument(capture_parser)

    render_parser = subparsers.add_parser(
        "render", help="Rebuild the views of a saved HTML file without a browser"
    )
    render_parser.add_argument("html_file", type=Path, help="Saved page HTML")
    render_parser.add_argument(
        "--css",
        action="append",
        type=Path,
        default=[],
        help="Stylesheet to embed; repeat to keep several in order",
    )
    _add_output_arguments(render_parser)
    _add_verbose_argument(render_parser)

    extract_parser = subparsers.add_parser(
        "extract", help="Print the text of CSS-selected fields as JSON"
    )
    extract_parser.add_argument("url", help="URL of the page to read")
    extract_parser.add_argument(
        "--selector",
        action="append",
        type=_selector_pair,
        required=True,
        metavar="NAME=CSS",
        help="Field name and CSS selector; repeat for several fields",
    )
    extract_parser.add_argument(
        "--offline-html",
        type=Path,
        default=None,
        help="Evaluate selectors against this saved HTML instead of the live page",
    )
    _add_browser_arguments(extract_parser)
    _add_verbose_argument(extract_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def _configure_logging(verbose: bool, quiet: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    if quiet and not verbose:
        level = logging.ERROR
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _print_views(results: List[CaptureResult], view: str) -> None:
    for idx, result in enumerate(results):
        content = result.views[view]
        if idx and not content.startswith("\n"):
            sys.stdout.write("\n")
        sys.stdout.write(content if content.endswith("\n") else content + "\n")
    sys.stdout.flush()


def _run_capture(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose, quiet=args.print_view is not None)

    config = CaptureConfig(
        output_root=Path(args.output).resolve(),
        wait_after_load=args.wait,
        navigation_timeout=args.timeout,
        stylesheet_timeout=args.stylesheet_timeout,
        fetch_external_styles=not args.no_external_styles,
        user_agent=args.user_agent,
    )

    overall_start = time.perf_counter()
    results = asyncio.run(run_capture(args.urls, config))
    total_elapsed = time.perf_counter() - overall_start

    successes = len(results)
    total_urls = len(args.urls)
    failures = total_urls - successes
    logger.info(
        "Finished in %.2fs (%d/%d succeeded, %d failed)",
        total_elapsed,
        successes,
        total_urls,
        failures,
    )
    for result in results:
        logger.debug("Timing for %s -> total: %.2fs", result.url, result.total_seconds)

    if args.print_view:
        _print_views(results, args.print_view)
    return 1 if failures else 0


def _run_render(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose, quiet=args.print_view is not None)
    try:
        result = render_saved_page(
            args.html_file, args.css, Path(args.output).resolve()
        )
    except OSError as exc:
        logger.error("Could not read input: %s", exc)
        return 1

    logger.debug("Rendered %s in %.2fs", args.html_file, result.total_seconds)
    if args.print_view:
        _print_views([result], args.print_view)
    return 0


def _run_extract(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose)
    selectors = dict(args.selector)

    if args.offline_html is not None:
        try:
            html = args.offline_html.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Could not read %s: %s", args.offline_html, exc)
            return 1
        result = select_fields(html, selectors)
    else:
        config = CaptureConfig(
            output_root=Path.cwd(),
            wait_after_load=args.wait,
            navigation_timeout=args.timeout,
            user_agent=args.user_agent,
        )
        try:
            result = asyncio.run(extract_from_url(args.url, selectors, config))
        except CaptureError as exc:
            logger.error("Failed to extract from %s: %s", args.url, exc)
            return 1

    sys.stdout.write(json.dumps(result, indent=2, ensure_ascii=False) + "\n")
    sys.stdout.flush()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    if args.command == "capture":
        return _run_capture(args)
    if args.command == "render":
        return _run_render(args)
    return _run_extract(args)


if __name__ == "__main__":
    sys.exit(main())
