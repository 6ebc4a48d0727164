"""Search Google Images and download the results."""

from .client import build_url, download, download_async, search, urls
from .config import (
    Color,
    ColorType,
    Format,
    ImageType,
    License,
    Ratio,
    SearchConfig,
    Time,
)
from .errors import DirError, ImageSearchError, NetworkError, ParseError
from .models import Image

__all__ = [
    "Color",
    "ColorType",
    "DirError",
    "Format",
    "Image",
    "ImageSearchError",
    "ImageType",
    "License",
    "NetworkError",
    "ParseError",
    "Ratio",
    "SearchConfig",
    "Time",
    "build_url",
    "download",
    "download_async",
    "search",
    "urls",
]
