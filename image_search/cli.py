"""Command-line entry point for image searches."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from enum import Enum
from pathlib import Path
from typing import Iterable, Sequence, Type

from .client import download, search, urls
from .config import (
    DEFAULT_TIMEOUT,
    Color,
    ColorType,
    Format,
    ImageType,
    License,
    Ratio,
    SearchConfig,
    Time,
)
from .errors import ImageSearchError

logger = logging.getLogger("image_search.cli")

_FILTERS = (
    ("color", Color),
    ("color_type", ColorType),
    ("license", License),
    ("image_type", ImageType),
    ("time", Time),
    ("ratio", Ratio),
    ("format", Format),
)


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or first.startswith("-"):
        return argv
    return ("search", *argv)


def _choices(enum: Type[Enum]) -> list:
    return [member.name.lower() for member in enum if member.value]


def _add_common_arguments(parser: argparse.ArgumentParser, default_limit: int) -> None:
    parser.add_argument("query", help="Search terms")
    parser.add_argument(
        "--limit",
        type=int,
        default=default_limit,
        help="Maximum number of images (0 for every result)",
    )
    parser.add_argument(
        "--thumbnails",
        action="store_true",
        help="Use thumbnail URLs instead of full-size image URLs",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="Per-request timeout in seconds (0 disables the timeout)",
    )
    for name, enum in _FILTERS:
        parser.add_argument(
            f"--{name.replace('_', '-')}",
            dest=name,
            choices=_choices(enum),
            default=None,
            help=f"Filter results by {name.replace('_', ' ')}",
        )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Search Google Images and list or download the results.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser(
        "search", help="Print image records as JSON lines"
    )
    _add_common_arguments(search_parser, default_limit=0)

    urls_parser = subparsers.add_parser("urls", help="Print image URLs")
    _add_common_arguments(urls_parser, default_limit=0)

    download_parser = subparsers.add_parser(
        "download", help="Download images into a directory"
    )
    _add_common_arguments(download_parser, default_limit=10)
    download_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Directory where images should be written (default: ./images)",
    )

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> SearchConfig:
    config = SearchConfig(
        query=args.query,
        limit=args.limit,
        thumbnails=args.thumbnails,
        timeout=args.timeout or None,
        directory=getattr(args, "output", None),
    )
    for name, enum in _FILTERS:
        choice = getattr(args, name)
        if choice:
            setattr(config, name, enum[choice.upper()])
    return config


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    config = build_config(args)

    start = time.perf_counter()
    try:
        if args.command == "search":
            for image in search(config):
                sys.stdout.write(json.dumps(image.to_dict()) + "\n")
        elif args.command == "urls":
            for url in urls(config):
                sys.stdout.write(url + "\n")
        else:
            paths = download(config)
            for path in paths:
                sys.stdout.write(f"{path}\n")
            logger.info(
                "Finished in %.2fs (%d/%d downloaded)",
                time.perf_counter() - start,
                len(paths),
                config.limit,
            )
    except ImageSearchError as exc:
        logger.error("%s", exc)
        return 1
    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
