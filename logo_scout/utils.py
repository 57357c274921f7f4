# File: logo_scout/utils.py
"""logo_scout.utils: URL resolution and reading of the input site list."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Collection, List, Optional, Sequence, Union
from urllib.parse import urljoin, urlparse

from logo_scout.logger import logger

__all__: Sequence[str] = (
    "resolve_url",
    "normalize_site_url",
    "site_root",
    "is_ico",
    "read_sites",
    "remove_duplicates",
)

_SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)
_HEADER_NAMES = frozenset({"domain", "site", "url", "website"})


def resolve_url(base: str, reference: Optional[str]) -> Optional[str]:
    """Resolve *reference* against *base*; ``None`` when it cannot serve as a logo URL.

    ``data:`` URIs are refused, scheme-relative references (``//cdn/...``) are
    forced to https, everything else goes through :func:`urllib.parse.urljoin`.
    Results that are not absolute http(s) URLs are treated as malformed.
    """
    if reference is None:
        return None
    ref = reference.strip()
    if not ref or ref.lower().startswith("data:"):
        return None
    try:
        resolved = "https:" + ref if ref.startswith("//") else urljoin(base, ref)
        parsed = urlparse(resolved)
    except ValueError:
        logger.debug("Malformed reference %r against %s", reference, base)
        return None
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return resolved


def is_ico(url: str) -> bool:
    """True for references pointing at ``.ico`` files (query and fragment ignored)."""
    return urlparse(url).path.lower().endswith(".ico")


def site_root(url: str) -> str:
    """Return ``scheme://host/`` for *url*."""
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}/"


def normalize_site_url(raw: str) -> Optional[str]:
    """Trim an input line into an absolute site URL, defaulting the scheme to https."""
    site = raw.strip().strip("\"'").rstrip(" ,/\\")
    if not site:
        return None
    if not _SCHEME_RE.match(site):
        site = "https://" + site
    return site


def read_sites(path: Union[str, Path]) -> List[str]:
    """Read a line-delimited (or CSV, first column) site list.

    Blank lines and a leading header row are skipped; duplicates are removed
    keeping the first occurrence.
    """
    p = Path(path).expanduser()
    if not p.is_file():
        logger.error("Site list not found: %s", p)
        raise FileNotFoundError(f"Site list not found: {p}")

    sites: List[str] = []
    first = True
    for line in p.read_text(encoding="utf-8-sig").splitlines():
        field = line.split(",", 1)[0].strip().strip("\"'")
        if not field:
            continue
        if first and field.lower() in _HEADER_NAMES:
            first = False
            continue
        first = False
        site = normalize_site_url(field)
        if site:
            sites.append(site)

    unique = remove_duplicates(sites)
    logger.debug("Loaded %d sites from %s", len(unique), p)
    return unique


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Remove duplicate URLs from the list, preserving order."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
