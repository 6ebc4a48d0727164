"""Concurrent downloads that fill a fixed set of files from a shared URL pool."""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import requests

from .config import USER_AGENT
from .errors import AttemptError, PoolExhausted
from .images import download_image

logger = logging.getLogger("image_search")


class CandidatePool:
    """Ordered URLs shared by every download task of one batch.

    Each URL is handed out exactly once, front first. Failed URLs are never
    put back.
    """

    def __init__(self, urls: Iterable[str]) -> None:
        self._urls: List[str] = list(urls)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)

    def pop(self) -> str:
        with self._lock:
            if not self._urls:
                raise PoolExhausted("Ran out of possible images")
            return self._urls.pop(0)


def create_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    return session


async def download_until(
    pool: CandidatePool,
    stem: Path,
    session: requests.Session,
    timeout: Optional[float] = None,
    executor: Optional[Executor] = None,
) -> Path:
    """Try candidates from ``pool`` until one lands at ``stem``.

    Raises :class:`PoolExhausted` once the pool is empty.
    """
    loop = asyncio.get_running_loop()
    while True:
        url = pool.pop()
        try:
            return await loop.run_in_executor(
                executor, download_image, session, url, stem, timeout
            )
        except AttemptError as exc:
            logger.debug("Attempt for %s failed: %s", stem.name, exc)


async def download_n(
    urls: Sequence[str],
    stems: Sequence[Path],
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> List[Path]:
    """Download up to one image per stem, drawing sources from ``urls``.

    Returns the written paths. Slots whose candidates all fail produce no
    file and no error.
    """
    if not stems:
        return []
    pool = CandidatePool(urls)
    owns_session = session is None
    if session is None:
        session = create_session()
    # One worker per slot so every slot fetches at the same time.
    executor = ThreadPoolExecutor(
        max_workers=len(stems), thread_name_prefix="image-search"
    )

    try:
        results = await asyncio.gather(
            *(
                download_until(pool, stem, session, timeout, executor)
                for stem in stems
            ),
            return_exceptions=True,
        )
    finally:
        executor.shutdown(wait=True)
        if owns_session:
            session.close()

    written: List[Path] = []
    for stem, result in zip(stems, results):
        if isinstance(result, PoolExhausted):
            logger.debug("No image for %s: %s", stem.name, result)
            continue
        if isinstance(result, BaseException):
            logger.warning("Download for %s failed: %r", stem.name, result)
            continue
        written.append(result)
    logger.info("Downloaded %d of %d images", len(written), len(stems))
    return written
