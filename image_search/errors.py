"""Exception types raised by the search and download pipeline."""

from __future__ import annotations


class ImageSearchError(Exception):
    """Base class for errors that abort a whole search or download."""


class ParseError(ImageSearchError):
    """Raised when images cannot be parsed out of the results page."""

    def __init__(self, message: str = "") -> None:
        detail = (
            "Unable to parse images from the results page; "
            "the page layout may have changed"
        )
        super().__init__(f"{detail}: {message}" if message else detail)


class DirError(ImageSearchError):
    """Raised when the download directory cannot be found or created."""


class NetworkError(ImageSearchError):
    """Raised when the results page cannot be fetched."""


class AttemptError(Exception):
    """A single download attempt failed; the next candidate should be tried."""


class FetchError(AttemptError):
    """The image request failed, timed out or returned an error status."""


class ExtensionError(AttemptError):
    """The downloaded bytes are not a recognised image type."""


class StorageError(AttemptError):
    """The image could not be written to disk."""


class PoolExhausted(Exception):
    """No untried candidate URLs remain for a download slot."""
