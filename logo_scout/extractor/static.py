# logo_scout/extractor/static.py
"""
Static logo extraction: one GET of the site's HTML and a tiered search.

Tier 1 (metadata) is tried in order: apple-touch-icon link, ``og:image`` meta,
generic icon link. The first resolvable non-``.ico`` reference wins.
Tier 2 scans ``<img>`` elements whose class, id, alt or src mention "logo",
then images inside a link to the site root.
"""
from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from logo_scout.errors import LogoScoutError
from logo_scout.extractor.fetcher import Fetcher
from logo_scout.extractor.models import CandidateKind, CandidateReference, ExtractionCandidate
from logo_scout.logger import get_logger
from logo_scout.utils import is_ico, resolve_url, site_root

__all__ = ["find_logo", "collect_candidates", "extract_static"]

log = get_logger("static")

# (kind, tag name, exact rel tokens or meta property, attribute holding the reference)
_Probe = Tuple[CandidateKind, str, Tuple[str, ...], str]

_METADATA_PROBES: Tuple[_Probe, ...] = (
    (CandidateKind.APPLE_ICON, "link", ("apple-touch-icon",), "href"),
    (CandidateKind.OG_IMAGE, "meta", ("og:image",), "content"),
    (CandidateKind.FAVICON, "link", ("icon",), "href"),
)
_SHORTCUT_PROBE: _Probe = (CandidateKind.SHORTCUT_ICON, "link", ("shortcut", "icon"), "href")


def _rel_tokens(tag: Tag) -> Tuple[str, ...]:
    rel = tag.get("rel") or ()
    if isinstance(rel, str):
        rel = rel.split()
    return tuple(token.lower() for token in rel)


def _probe_matches(tag: Tag, name: str, key: Tuple[str, ...]) -> bool:
    if tag.name != name:
        return False
    if name == "meta":
        return (tag.get("property") or "").strip().lower() == key[0]
    return _rel_tokens(tag) == key


def _iter_probe(soup: BeautifulSoup, probe: _Probe) -> Iterator[str]:
    _, name, key, attr = probe
    for tag in soup.find_all(lambda t: _probe_matches(t, name, key)):
        value = tag.get(attr)
        if value:
            yield value


def _first_probe(soup: BeautifulSoup, probe: _Probe) -> Optional[str]:
    _, name, key, attr = probe
    tag = soup.find(lambda t: _probe_matches(t, name, key))
    return tag.get(attr) if tag is not None else None


def _mentions_logo(img: Tag) -> bool:
    classes = img.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    fields = (" ".join(classes), img.get("id") or "", img.get("alt") or "", img.get("src") or "")
    return any("logo" in field.lower() for field in fields)


def _is_home_href(href: str, base_url: str) -> bool:
    if href.strip() == "/":
        return True
    resolved = resolve_url(base_url, href)
    if resolved is None:
        return False
    return resolved.rstrip("/") in (base_url.rstrip("/"), site_root(base_url).rstrip("/"))


def _home_link_images(soup: BeautifulSoup, base_url: str) -> Iterator[Tag]:
    for anchor in soup.find_all("a", href=True):
        if _is_home_href(anchor["href"], base_url):
            yield from anchor.find_all("img", src=True)


def find_logo(html: str, base_url: str) -> Optional[ExtractionCandidate]:
    """Apply the tiered heuristics to *html* served from *base_url*."""
    soup = BeautifulSoup(html, "html.parser")

    for probe in _METADATA_PROBES:
        ref = _first_probe(soup, probe)
        if ref and not is_ico(ref):
            url = resolve_url(base_url, ref)
            if url:
                return ExtractionCandidate(probe[0], url)

    for img in soup.find_all("img", src=True):
        if not _mentions_logo(img):
            continue
        url = resolve_url(base_url, img["src"])
        if url and not is_ico(url):
            return ExtractionCandidate(CandidateKind.CLASS_HEURISTIC, url)

    img = next(_home_link_images(soup, base_url), None)
    if img is not None:
        url = resolve_url(base_url, img["src"])
        if url:
            return ExtractionCandidate(CandidateKind.HOME_LINK, url)
    return None


def collect_candidates(html: str, base_url: str) -> List[CandidateReference]:
    """Every candidate reference on the page, in priority order, without short-circuit."""
    soup = BeautifulSoup(html, "html.parser")
    found: List[CandidateReference] = []

    def _add(kind: CandidateKind, ref: str) -> None:
        found.append(CandidateReference(kind, ref, resolve_url(base_url, ref)))

    for probe in (*_METADATA_PROBES, _SHORTCUT_PROBE):
        for ref in _iter_probe(soup, probe):
            _add(probe[0], ref)
    for img in soup.find_all("img", src=True):
        if _mentions_logo(img):
            _add(CandidateKind.CLASS_HEURISTIC, img["src"])
    for img in _home_link_images(soup, base_url):
        _add(CandidateKind.HOME_LINK, img["src"])
    return found


async def extract_static(site_url: str, fetcher: Fetcher) -> Optional[ExtractionCandidate]:
    """Fetch *site_url* and return its best logo candidate, or ``None``."""
    try:
        document = await fetcher.fetch_document(site_url)
    except LogoScoutError as exc:
        log.debug("Static fetch failed: %s", exc)
        return None
    if not isinstance(document.body, str):
        return None
    candidate = find_logo(document.body, document.final_url)
    if candidate is None:
        log.debug("No static candidate on %s (HTTP %s)", document.final_url, document.status_code)
    return candidate
