# logo_scout/extractor/dynamic.py
"""
Dynamic logo extraction for pages whose logo is injected by client-side
script.

A single Chromium instance (:class:`RenderEngine`) is launched once per run
and passed to :func:`extract_dynamic`, which opens an isolated browser
context per site and always closes it again.
"""
from __future__ import annotations

import asyncio
from typing import Any, Optional

from playwright.async_api import Browser, BrowserContext, Playwright, Route, async_playwright
from playwright.async_api import Error as PlaywrightError

from logo_scout.config import ScoutConfig
from logo_scout.errors import BrowserUnavailable
from logo_scout.extractor.models import CandidateKind, ExtractionCandidate
from logo_scout.logger import get_logger
from logo_scout.utils import is_ico, resolve_url

__all__ = ["BLOCKED_RESOURCE_TYPES", "RenderEngine", "extract_dynamic"]

log = get_logger("dynamic")

BLOCKED_RESOURCE_TYPES = frozenset({"font", "stylesheet", "media"})

LAUNCH_ARGS = [
    "--disable-blink-features=AutomationControlled",
    "--no-sandbox",
    "--disable-dev-shm-usage",
]

# Same priorities as the static extractor, evaluated against the live DOM.
# Every candidate is returned in order; resolution and filtering happen in
# _first_candidate. Rendered width filters out tracking pixels.
_LOGO_SCRIPT = """
() => {
  const found = [];
  const metadata = [
    ['apple-touch-icon', 'link[rel="apple-touch-icon"]', 'href'],
    ['og:image', 'meta[property="og:image"]', 'content'],
    ['icon', 'link[rel="icon"]', 'href'],
  ];
  for (const [kind, selector, attr] of metadata) {
    const el = document.querySelector(selector);
    const ref = el ? el.getAttribute(attr) : null;
    if (ref) found.push({kind, ref});
  }
  for (const img of Array.from(document.images)) {
    const src = img.currentSrc || img.getAttribute('src') || '';
    const hay = [img.className, img.id, img.alt, src].join(' ').toLowerCase();
    if (src && hay.includes('logo') && img.width > 20) {
      found.push({kind: 'logo-image', ref: src});
    }
  }
  for (const img of document.querySelectorAll('header img, nav img, .navbar img, a[href="/"] img')) {
    const src = img.currentSrc || img.getAttribute('src');
    if (src) found.push({kind: 'home-link-image', ref: src});
  }
  return found;
}
"""


async def _block_heavy_resources(route: Route) -> None:
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        await route.abort()
    else:
        await route.continue_()


class RenderEngine:
    """Async context manager owning the Playwright driver and one Chromium."""

    def __init__(self, *, headless: bool = True) -> None:
        self.headless = headless
        self._playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None

    async def __aenter__(self) -> Browser:
        try:
            self._playwright = await async_playwright().start()
            self.browser = await self._playwright.chromium.launch(headless=self.headless, args=LAUNCH_ARGS)
        except PlaywrightError as exc:
            await self.close()
            raise BrowserUnavailable(f"cannot launch headless Chromium: {exc}") from exc
        log.debug("Headless Chromium %s launched", self.browser.version)
        return self.browser

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self.browser is not None:
            try:
                await self.browser.close()
            except PlaywrightError as exc:
                log.warning("Error closing browser: %s", exc)
            self.browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None


async def _close_context(context: BrowserContext, site_url: str) -> None:
    try:
        await context.close()
    except PlaywrightError as exc:
        log.debug("Error closing context for %s: %s", site_url, exc)


def _first_candidate(found: Any, page_url: str) -> Optional[ExtractionCandidate]:
    """First entry of the in-page candidate list that resolves to a non-``.ico`` URL."""
    if not isinstance(found, list):
        return None
    for entry in found:
        if not isinstance(entry, dict):
            continue
        url = resolve_url(page_url, entry.get("ref"))
        if url is None or is_ico(url):
            continue
        try:
            kind = CandidateKind(entry.get("kind"))
        except ValueError:
            kind = CandidateKind.CLASS_HEURISTIC
        return ExtractionCandidate(kind, url)
    return None


async def extract_dynamic(site_url: str, browser: Browser, config: ScoutConfig) -> Optional[ExtractionCandidate]:
    """Render *site_url* in a fresh context of *browser* and look for a logo."""
    timeout_ms = config.render_timeout * 1000
    context: Optional[BrowserContext] = None
    try:
        context = await browser.new_context(
            user_agent=config.user_agent,
            ignore_https_errors=not config.verify_ssl,
        )
        await context.route("**/*", _block_heavy_resources)
        page = await context.new_page()
        # evaluate() has no timeout of its own
        async with asyncio.timeout(config.render_timeout * 2):
            await page.goto(site_url, timeout=timeout_ms, wait_until="networkidle")
            found = await page.evaluate(_LOGO_SCRIPT)
        page_url = page.url
    except (PlaywrightError, TimeoutError) as exc:
        log.debug("Render failed for %s: %s", site_url, exc)
        return None
    finally:
        if context is not None:
            await _close_context(context, site_url)

    candidate = _first_candidate(found, page_url)
    if candidate is None:
        log.debug("No dynamic candidate on %s", site_url)
    return candidate
