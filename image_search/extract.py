"""Image record extraction from Google Images result pages.

The results page embeds its data as a JavaScript call whose argument holds a
large nested array. Records are addressed by fixed positions inside that
array, so every lookup below goes through :func:`_follow`, which turns a
wrong type or a missing index/key into :class:`_Mismatch`.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Sequence, Union

from .errors import ParseError
from .models import Image

logger = logging.getLogger("image_search")

ANCHOR = "AF_initDataCallback"
SCRIPT_END = "</script>"

Step = Union[int, str]

ENTRIES_PATH: Sequence[Step] = (56, 1, 0, -1, 1, 0)
RECORD_PATH: Sequence[Step] = (0, 0, "444383007", 1)
IMAGE_PATH: Sequence[Step] = (3,)
THUMBNAIL_PATH: Sequence[Step] = (2, 0)
SOURCE_PATH: Sequence[Step] = (22, "2003", 2)


class _Mismatch(Exception):
    pass


def _follow(node: Any, path: Sequence[Step]) -> Any:
    """Walk ``path`` through nested lists and dicts."""
    for step in path:
        if isinstance(step, int):
            if not isinstance(node, list):
                raise _Mismatch(f"expected array at step {step!r}")
            try:
                node = node[step]
            except IndexError:
                raise _Mismatch(f"index {step} out of range") from None
        else:
            if not isinstance(node, dict) or step not in node:
                raise _Mismatch(f"missing key {step!r}")
            node = node[step]
    return node


def _as_str(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise _Mismatch("expected non-empty string")
    return value


def _as_dimension(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise _Mismatch("expected positive integer")
    return value


def _payload(body: str) -> str:
    """Cut the JSON array out of the last data callback on the page."""
    anchor = body.rfind(ANCHOR)
    if anchor == -1:
        raise ParseError(f"{ANCHOR} not found")
    body = body[anchor:]

    start = body.find("[")
    if start == -1:
        raise ParseError("no array after data callback")
    body = body[start:]

    end = body.find(SCRIPT_END)
    if end == -1:
        raise ParseError("data callback script is not terminated")
    body = body[:end]

    # The array is followed by further call arguments; drop them.
    comma = body.rfind(",")
    if comma == -1:
        raise ParseError("data callback has no trailing arguments")
    return body[:comma]


def _read_record(entry: Any) -> Image:
    inner = _follow(entry, RECORD_PATH)
    full = _follow(inner, IMAGE_PATH)
    url = _as_str(_follow(full, (0,)))
    height = _as_dimension(_follow(full, (1,)))
    width = _as_dimension(_follow(full, (2,)))
    return Image(
        url=url,
        width=width,
        height=height,
        thumbnail=_as_str(_follow(inner, THUMBNAIL_PATH)),
        source=_as_str(_follow(inner, SOURCE_PATH)),
    )


def unpack(body: str) -> List[Image]:
    """Extract image records from the raw HTML of a results page.

    Raises :class:`ParseError` when the embedded data is missing, is not
    valid JSON, or does not contain the list of results. Individual results
    that do not match the expected layout are skipped.
    """
    try:
        data = json.loads(_payload(body))
    except (ValueError, RecursionError) as exc:
        raise ParseError(str(exc)) from exc

    try:
        entries = _follow(data, ENTRIES_PATH)
        if not isinstance(entries, list):
            raise _Mismatch("result list is not an array")
    except _Mismatch as exc:
        raise ParseError(str(exc)) from None

    images: List[Image] = []
    for index, entry in enumerate(entries):
        try:
            images.append(_read_record(entry))
        except _Mismatch as exc:
            logger.debug("Skipping result %d: %s", index, exc)
    logger.debug("Extracted %d of %d results", len(images), len(entries))
    return images
