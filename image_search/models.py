"""Data models used throughout the search pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Union


@dataclass(frozen=True)
class Image:
    """One image found by a search.

    ``url`` points at the full-resolution file, ``thumbnail`` at the preview
    hosted by the search engine and ``source`` at the page the image was
    found on. Dimensions are in pixels.
    """

    url: str
    width: int
    height: int
    thumbnail: str
    source: str

    def to_dict(self) -> Dict[str, Union[str, int]]:
        return asdict(self)
