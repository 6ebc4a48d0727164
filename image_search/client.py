"""High-level search and download entry points."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional
from urllib.parse import quote_plus

import requests

from .config import FILTER_PREFIX, SEARCH_ENDPOINT, USER_AGENT, SearchConfig
from .downloader import download_n
from .errors import NetworkError
from .extract import unpack
from .models import Image
from .utils import reserve_stems, slugify

logger = logging.getLogger("image_search")


def build_url(config: SearchConfig) -> str:
    """Build the results page URL for a query and its filters."""
    url = SEARCH_ENDPOINT + quote_plus(config.query)
    params = config.params()
    if params:
        url += FILTER_PREFIX + params
    return url


def fetch_document(url: str, timeout: Optional[float] = None) -> str:
    """Fetch a results page the way a desktop browser would."""
    try:
        resp = requests.get(url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise NetworkError(f"Unable to fetch webpage: {exc}") from exc
    return resp.text


def search(config: SearchConfig) -> List[Image]:
    """Search for images and return up to ``config.limit`` records."""
    url = build_url(config)
    logger.info("Searching images for %r", config.query)
    images = unpack(fetch_document(url, config.timeout))
    if config.limit > 0:
        images = images[: config.limit]
    return images


def urls(config: SearchConfig) -> List[str]:
    """Search and return the image URLs, or thumbnail URLs when requested."""
    images = search(config)
    if config.thumbnails:
        return [image.thumbnail for image in images]
    return [image.url for image in images]


async def download_async(config: SearchConfig) -> List[Path]:
    """Search and download ``config.limit`` images into the target directory.

    Every result is a candidate, so failed downloads are replaced by later
    results until the results run out. The files are named after the query
    with a numeric suffix and the detected extension.
    """
    stems = reserve_stems(
        config.resolve_directory(),
        slugify(config.query, fallback="image"),
        config.limit,
    )
    candidates = await asyncio.to_thread(urls, replace(config, limit=0))
    logger.info(
        "Downloading %d images from %d candidates", len(stems), len(candidates)
    )
    return await download_n(candidates, stems, config.timeout)


def download(config: SearchConfig) -> List[Path]:
    """Blocking variant of :func:`download_async`."""
    return asyncio.run(download_async(config))
