# logo_scout/extractor/fetcher.py
"""
Fetcher module: HTTP GETs for pages and logo images with timeout, bounded
redirects and relaxed TLS validation.
"""
from __future__ import annotations

import asyncio

from aiohttp import ClientError, ClientSession, ClientTimeout, TCPConnector

from logo_scout.config import ScoutConfig
from logo_scout.errors import NetworkFailure, UnsupportedContent
from logo_scout.extractor.models import FetchedDocument, ImageAsset

__all__ = ["BROWSER_HEADERS", "open_session", "Fetcher"]

BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,image/apng,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
}

_TEXT_MARKERS = ("html", "xml", "text/")


def open_session(config: ScoutConfig) -> ClientSession:
    """Create the shared session used for every page and image download of a run."""
    connector = TCPConnector(ssl=config.verify_ssl, limit=config.concurrency * 2)
    return ClientSession(
        connector=connector,
        timeout=ClientTimeout(total=config.http_timeout),
        headers={"User-Agent": config.user_agent, **BROWSER_HEADERS},
        raise_for_status=False,
    )


def _mime(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


class Fetcher:
    """Single-attempt GETs; failures are raised as :mod:`logo_scout.errors` types."""

    def __init__(self, session: ClientSession, config: ScoutConfig) -> None:
        self.session = session
        self.config = config

    async def fetch_document(self, url: str) -> FetchedDocument:
        """
        Fetch a page following redirects.

        Any status below 500 is returned, error pages included. Raises
        NetworkFailure on transport errors and 5xx, UnsupportedContent when the
        body is not textual.
        """
        try:
            async with self.session.get(url, max_redirects=self.config.max_redirects) as resp:
                if resp.status >= 500:
                    raise NetworkFailure(url, f"HTTP {resp.status}", resp.status)
                ctype = resp.headers.get("Content-Type", "")
                mime = _mime(ctype)
                if mime and not any(marker in mime for marker in _TEXT_MARKERS):
                    raise UnsupportedContent(f"{url}: expected HTML, got {mime}")
                text = await resp.text(errors="replace")
                return FetchedDocument(
                    final_url=str(resp.url),
                    body=text,
                    status_code=resp.status,
                    content_type=ctype,
                )
        except asyncio.TimeoutError as exc:
            raise NetworkFailure(url, "timeout") from exc
        except ClientError as exc:
            raise NetworkFailure(url, f"{type(exc).__name__}: {exc}") from exc
        except (UnicodeDecodeError, LookupError) as exc:
            raise UnsupportedContent(f"{url}: undecodable body") from exc

    async def fetch_image(self, url: str) -> ImageAsset:
        """Download a logo candidate; content type is validated later by the hasher."""
        try:
            async with self.session.get(url, max_redirects=self.config.max_redirects) as resp:
                if resp.status >= 500:
                    raise NetworkFailure(url, f"HTTP {resp.status}", resp.status)
                declared = resp.content_length
                if declared is not None and declared > self.config.max_image_bytes:
                    raise UnsupportedContent(f"{url}: image too large ({declared} bytes)")
                data = bytearray()
                async for chunk in resp.content.iter_chunked(64 * 1024):
                    data.extend(chunk)
                    if len(data) > self.config.max_image_bytes:
                        raise UnsupportedContent(f"{url}: image too large (> {self.config.max_image_bytes} bytes)")
                return ImageAsset(url=str(resp.url), data=bytes(data), content_type=resp.headers.get("Content-Type", ""))
        except asyncio.TimeoutError as exc:
            raise NetworkFailure(url, "timeout") from exc
        except ClientError as exc:
            raise NetworkFailure(url, f"{type(exc).__name__}: {exc}") from exc
