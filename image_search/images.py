"""Image type detection and single download attempts."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Optional

import requests
import urllib3
from filetype import guess

from .errors import ExtensionError, FetchError, StorageError

logger = logging.getLogger("image_search")

SVG_SNIFF_BYTES = 1024
SVG_MARKER = "<svg"
CHUNK_SIZE = 64 * 1024


def _looks_like_svg(data: bytes) -> bool:
    try:
        head = data[:SVG_SNIFF_BYTES].decode("utf-8")
    except UnicodeDecodeError:
        return False
    return SVG_MARKER in head


def detect_image_format(data: bytes) -> Optional[str]:
    """Detect image type using filetype; returns lowercase extension."""
    kind = guess(data)
    if kind and kind.mime.startswith("image/"):
        ext = kind.extension.lower()
        if ext == "jpeg":
            return "jpg"
        return ext
    return None


def classify(data: bytes) -> str:
    """Return the file extension for downloaded image bytes.

    SVG is recognised by its markup; everything else by file signature.
    Raises :class:`ExtensionError` when the bytes are not a known image.
    """
    if _looks_like_svg(data):
        return "svg"
    extension = detect_image_format(data)
    if extension is None:
        raise ExtensionError("File type not known or not an image")
    return extension


def with_extension(stem: Path, extension: str) -> Path:
    return stem.with_name(f"{stem.name}.{extension}")


def _fetch_bytes(
    session: requests.Session, url: str, timeout: Optional[float]
) -> bytes:
    deadline = None if timeout is None else time.monotonic() + timeout
    chunks = []
    try:
        with session.get(url, timeout=timeout, stream=True) as resp:
            resp.raise_for_status()
            # read1 does one socket read per call; the deadline is checked between reads.
            while True:
                chunk = resp.raw.read1(CHUNK_SIZE, decode_content=True)
                if not chunk:
                    break
                chunks.append(chunk)
                if deadline is not None and time.monotonic() > deadline:
                    raise FetchError(
                        f"Timed out fetching image {url} after {timeout}s"
                    )
    except (requests.RequestException, urllib3.exceptions.HTTPError) as exc:
        raise FetchError(f"Unable to fetch image {url}: {exc}") from exc
    return b"".join(chunks)


def download_image(
    session: requests.Session,
    url: str,
    stem: Path,
    timeout: Optional[float] = None,
) -> Path:
    """Fetch ``url`` once and write it next to ``stem`` with its real extension.

    ``timeout`` bounds the whole attempt, body included, not just each read.
    """
    data = _fetch_bytes(session, url, timeout)
    extension = classify(data)
    destination = with_extension(stem, extension)
    try:
        destination.write_bytes(data)
    except OSError as exc:
        raise StorageError(f"Failed to write image {destination}: {exc}") from exc
    return destination
