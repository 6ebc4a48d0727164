"""Configuration objects and constants for image searches."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

SEARCH_ENDPOINT = "https://www.google.com/search?tbm=isch&q="
FILTER_PREFIX = "&tbs=ic:specific"
FILTER_SEPARATOR = "%2C"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/88.0.4324.104 Safari/537.36"
)
DEFAULT_TIMEOUT = 20.0
DEFAULT_DIRECTORY_NAME = "images"


class Color(Enum):
    NONE = ""
    RED = "isc:red"
    ORANGE = "isc:orange"
    YELLOW = "isc:yellow"
    GREEN = "isc:green"
    TEAL = "isc:teal"
    BLUE = "isc:blue"
    PURPLE = "isc:purple"
    PINK = "isc:pink"
    WHITE = "isc:white"
    GRAY = "isc:gray"
    BLACK = "isc:black"
    BROWN = "isc:brown"


class ColorType(Enum):
    NONE = ""
    COLOR = "ic:full"
    GRAYSCALE = "ic:gray"
    TRANSPARENT = "ic:trans"


class License(Enum):
    NONE = ""
    CREATIVE_COMMONS = "il:cl"
    OTHER = "il:ol"


class ImageType(Enum):
    NONE = ""
    FACE = "itp:face"
    PHOTO = "itp:photo"
    CLIPART = "itp:clipart"
    LINEART = "itp:lineart"
    ANIMATED = "itp:animated"


class Time(Enum):
    """How long ago the images may have been posted."""

    NONE = ""
    DAY = "qdr:d"
    WEEK = "qdr:w"
    MONTH = "qdr:m"
    YEAR = "qdr:y"


class Ratio(Enum):
    """Rough aspect ratio filter."""

    NONE = ""
    TALL = "iar:t"
    SQUARE = "iar:s"
    WIDE = "iar:w"
    PANORAMIC = "iar:xw"


class Format(Enum):
    NONE = ""
    JPG = "ift:jpg"
    GIF = "ift:gif"
    PNG = "ift:png"
    BMP = "ift:bmp"
    SVG = "ift:svg"
    WEBP = "ift:webp"
    ICO = "ift:ico"
    RAW = "ift:raw"


@dataclass
class SearchConfig:
    """Settings that control a search and, optionally, the download that follows.

    ``limit`` caps the records returned by a search (0 means no cap) and is the
    number of files a download tries to write. ``timeout`` applies to every
    request; ``None`` disables it, which can leave a download hanging on a
    server that never finishes sending. ``thumbnails`` switches URL listings
    and downloads over to the thumbnail URLs. ``directory`` is only used by
    downloads and defaults to ``./images``.
    """

    query: str
    limit: int = 0
    thumbnails: bool = False
    timeout: Optional[float] = DEFAULT_TIMEOUT
    directory: Optional[Path] = None
    color: Color = Color.NONE
    color_type: ColorType = ColorType.NONE
    license: License = License.NONE
    image_type: ImageType = ImageType.NONE
    time: Time = Time.NONE
    ratio: Ratio = Ratio.NONE
    format: Format = Format.NONE

    def params(self) -> str:
        """Join the active filters into the ``tbs`` parameter tail."""
        filters = (
            self.color,
            self.color_type,
            self.license,
            self.image_type,
            self.time,
            self.ratio,
            self.format,
        )
        return "".join(FILTER_SEPARATOR + f.value for f in filters if f.value)

    def resolve_directory(self) -> Path:
        if self.directory is not None:
            return Path(self.directory)
        return Path.cwd() / DEFAULT_DIRECTORY_NAME
