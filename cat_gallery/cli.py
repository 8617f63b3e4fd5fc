"""Command-line entry point for the cat gallery."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Sequence, TextIO

from .config import (
    DEFAULT_BASE_URL,
    DEFAULT_PAGE_SIZE,
    DEFAULT_TIMEOUT,
    DEFAULT_TITLE,
    GalleryConfig,
)
from .errors import GalleryError
from .gallery import GalleryResult, run_gallery

logger = logging.getLogger("cat_gallery.cli")


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return ("browse",)
    first = argv[0]
    if first in commands or first in ("-h", "--help"):
        return argv
    return ("browse", *argv)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--pages",
        type=int,
        default=3,
        help="Maximum number of pages to load",
    )
    parser.add_argument(
        "--page-size",
        type=int,
        default=DEFAULT_PAGE_SIZE,
        help="Number of cats requested per page",
    )
    parser.add_argument(
        "--start-page",
        type=int,
        default=None,
        help="Page key to start from (default: first page)",
    )
    parser.add_argument(
        "--base-url",
        default=DEFAULT_BASE_URL,
        help="Base URL of the cat API",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="HTTP timeout in seconds",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random card dimensions",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Browse paginated cat images from cataas.com.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    browse_parser = subparsers.add_parser(
        "browse", help="Print cats page by page"
    )
    _add_common_arguments(browse_parser)

    download_parser = subparsers.add_parser(
        "download", help="Download cat images and write a Markdown gallery"
    )
    _add_common_arguments(download_parser)
    download_parser.add_argument(
        "--output",
        default="output",
        type=Path,
        help="Directory where images and index.md should be written",
    )
    download_parser.add_argument(
        "--title",
        default=DEFAULT_TITLE,
        help="Title of the generated gallery",
    )

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    args = parser.parse_args(argv)
    if args.page_size <= 0:
        parser.error("--page-size must be positive")
    if args.pages <= 0:
        parser.error("--pages must be positive")
    if args.start_page is not None and args.start_page < 0:
        parser.error("--start-page must not be negative")
    return args


def build_config(args: argparse.Namespace) -> GalleryConfig:
    output = getattr(args, "output", None) or Path("output")
    return GalleryConfig(
        output_root=Path(output).resolve(),
        base_url=args.base_url,
        page_size=args.page_size,
        max_pages=args.pages,
        start_page=args.start_page,
        timeout=args.timeout,
        download=args.command == "download",
        seed=args.seed,
        title=getattr(args, "title", DEFAULT_TITLE),
    )


def print_pages(result: GalleryResult, stream: TextIO) -> None:
    """Write one line per cat, grouped under a header per page."""
    position = 0
    for page in result.pages:
        stream.write(
            f"== page {page.key} ({len(page)} cats, prev={page.prev_key}, "
            f"next={page.next_key})\n"
        )
        for item in page.items:
            position += 1
            tags = ", ".join(item.tags)
            stream.write(
                f"Cat #{position}\t{item.id}\t{item.url}\t[{tags}]\t"
                f"{item.width}x{item.height}\n"
            )
    stream.flush()


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    config = build_config(args)
    try:
        result = run_gallery(config)
    except GalleryError as exc:
        logger.error("Loading cats failed: %s", exc)
        return 1

    if args.command == "browse":
        print_pages(result, sys.stdout)

    logger.info(
        "Finished in %.2fs (%d page(s), %d cat(s))",
        result.total_seconds,
        result.page_count,
        len(result.items),
    )
    if args.verbose and result.output_path:
        logger.debug("Gallery written to %s", result.output_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
