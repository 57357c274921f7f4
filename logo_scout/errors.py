# logo_scout/errors.py
"""
Failure taxonomy of the extraction pipeline.

Low-level helpers raise these; every stage boundary turns them into ``None``
so that nothing crosses into the scheduler.
"""
from __future__ import annotations

__all__ = [
    "LogoScoutError",
    "NetworkFailure",
    "MalformedReference",
    "UnsupportedContent",
    "ImageRejected",
    "DecodeFailure",
    "RenderFailure",
    "BrowserUnavailable",
]


class LogoScoutError(Exception):
    """Base class for recoverable per-site failures."""


class NetworkFailure(LogoScoutError):
    """Timeout, refused connection, TLS failure, redirect loop or HTTP status >= 500."""

    def __init__(self, url: str, reason: str, status: int | None = None) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
        self.status = status


class MalformedReference(LogoScoutError):
    """A candidate reference that cannot be resolved into an absolute URL."""


class UnsupportedContent(LogoScoutError):
    """Non-HTML body where HTML was expected, non-image where an image was expected."""


class ImageRejected(UnsupportedContent):
    """Image asset refused before decoding (too small, too large)."""


class DecodeFailure(LogoScoutError):
    """Image bytes do not parse as a supported raster format."""


class RenderFailure(LogoScoutError):
    """Headless navigation or in-page evaluation error or timeout."""


class BrowserUnavailable(RuntimeError):
    """The shared headless browser could not be launched; fatal for the run."""
