"""Utility helpers for string normalization and path handling."""

from __future__ import annotations

import glob
import re
from pathlib import Path
from typing import List

from .errors import DirError

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(value: str, fallback: str = "image") -> str:
    """Generate a filesystem-friendly slug using ASCII characters only."""
    normalized = value.encode("ascii", "ignore").decode("ascii")
    normalized = normalized.lower()
    normalized = SLUG_PATTERN.sub("-", normalized).strip("-")
    return normalized or fallback


def _is_taken(stem: Path) -> bool:
    pattern = glob.escape(str(stem)) + ".*"
    return next(glob.iglob(pattern), None) is not None


def reserve_stems(directory: Path, base_name: str, count: int) -> List[Path]:
    """Reserve ``count`` unused file stems named ``base_name`` plus a number.

    A stem is free when no file ``<stem>.*`` exists. One suffix counter is
    shared by all reservations: a collision moves it forward for good, so
    with ``cat1.png`` on disk three reservations give ``cat0``, ``cat2`` and
    ``cat3``.
    """
    directory = Path(directory)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirError(f"Unable to find or create {directory}: {exc}") from exc
    directory = directory.resolve()

    stems: List[Path] = []
    suffix = 0
    for _ in range(count):
        stem = directory / f"{base_name}{suffix}"
        while _is_taken(stem):
            suffix += 1
            stem = directory / f"{base_name}{suffix}"
        stems.append(stem)
        suffix += 1
    return stems
