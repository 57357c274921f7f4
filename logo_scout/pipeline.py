# logo_scout/pipeline.py
"""
Per-site worker: static extraction, dynamic fallback, download and hash.

Every failure is converted into an outcome tag; :meth:`SitePipeline.process`
never raises for a site-level problem.
"""
from __future__ import annotations

import asyncio
from typing import Optional

from playwright.async_api import Browser

from logo_scout.config import ScoutConfig
from logo_scout.errors import LogoScoutError
from logo_scout.extractor.dynamic import extract_dynamic
from logo_scout.extractor.fetcher import Fetcher
from logo_scout.extractor.static import extract_static
from logo_scout.hasher import dhash
from logo_scout.logger import get_logger
from logo_scout.models import Method, Outcome, SiteOutcome, SiteRecord

__all__ = ["SitePipeline"]


class SitePipeline:
    """Extraction → hashing for a single site, sharing one session and browser."""

    def __init__(self, config: ScoutConfig, fetcher: Fetcher, browser: Optional[Browser] = None) -> None:
        self.config = config
        self.fetcher = fetcher
        self.browser = browser
        self.logger = get_logger("pipeline")

    async def process(self, site: str) -> SiteOutcome:
        candidate = await extract_static(site, self.fetcher)
        if candidate is not None:
            method = Method.for_static(candidate.kind)
        elif self.browser is not None:
            candidate = await extract_dynamic(site, self.browser, self.config)
            method = Method.DYNAMIC
        if candidate is None:
            self.logger.debug("No logo found: %s", site)
            return SiteOutcome(site, Outcome.NO_LOGO)

        logo_hash = await self.hash_logo(candidate.url)
        if logo_hash is None:
            self.logger.debug("Logo not hashable: %s -> %s", site, candidate.url)
            return SiteOutcome(site, Outcome.HASH_FAILED)

        record = SiteRecord(site=site, logo_url=candidate.url, hash=logo_hash, method=method)
        self.logger.debug("%s -> %s [%s] %s", site, candidate.url, method.value, logo_hash)
        return SiteOutcome(site, Outcome.success(method), record)

    async def hash_logo(self, logo_url: str) -> Optional[str]:
        """Download *logo_url* and hash it off the event loop, bounded by ``hash_timeout``."""
        try:
            asset = await self.fetcher.fetch_image(logo_url)
        except LogoScoutError as exc:
            self.logger.debug("Logo download failed: %s", exc)
            return None
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(dhash, asset.data, asset.content_type, asset.length),
                timeout=self.config.hash_timeout,
            )
        except asyncio.TimeoutError:
            self.logger.debug("Hashing timed out: %s", logo_url)
            return None
