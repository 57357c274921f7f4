# logo_scout/diagnostics.py
"""
Single-site diagnostics for sites missing from the grouped output.

:class:`SiteAnalyzer` replays the static extraction with narration: the page
fetch, every candidate found by every tier, and why each candidate does or
does not validate as a hashable image.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from logo_scout.config import ScoutConfig
from logo_scout.errors import DecodeFailure, ImageRejected, NetworkFailure, UnsupportedContent
from logo_scout.extractor.fetcher import Fetcher, open_session
from logo_scout.extractor.models import CandidateReference, ExtractionCandidate
from logo_scout.extractor.static import collect_candidates, find_logo
from logo_scout.hasher import compute_dhash
from logo_scout.utils import is_ico

__all__ = ["Conclusion", "Verdict", "CandidateCheck", "Diagnosis", "SiteAnalyzer", "find_missing", "diagnose_sites"]


class Conclusion(str, Enum):
    NETWORK_FAILURE = "network-failure"
    NOT_HTML = "not-html"
    NO_CANDIDATES = "no-candidates"
    NO_VALID_IMAGES = "no-valid-images"
    VALID_LOGO_FOUND = "valid-logo-found"


class Verdict(str, Enum):
    OK = "ok"
    MALFORMED_URL = "malformed-url"
    DOWNLOAD_FAILED = "download-failed"
    NOT_AN_IMAGE = "not-an-image"
    REJECTED = "rejected"
    DECODE_FAILED = "decode-failed"


@dataclass(slots=True)
class CandidateCheck:
    candidate: CandidateReference
    verdict: Verdict
    detail: str = ""
    hash: Optional[str] = None

    def line(self) -> str:
        target = self.candidate.url or self.candidate.reference
        ico = " (.ico, ignored by the extractor)" if self.candidate.url and is_ico(self.candidate.url) else ""
        text = f"{self.candidate.kind.value}: {target}{ico} -> {self.verdict.value}"
        return f"{text} ({self.detail})" if self.detail else text


@dataclass(slots=True)
class Diagnosis:
    """Result of analysing one site."""

    site: str
    conclusion: Conclusion = Conclusion.NETWORK_FAILURE
    status_code: Optional[int] = None
    final_url: Optional[str] = None
    error: Optional[str] = None
    selected: Optional[ExtractionCandidate] = None
    checks: List[CandidateCheck] = field(default_factory=list)

    def narrate(self) -> List[str]:
        lines = [f"ANALYZING: {self.site}"]
        if self.status_code is None:
            lines.append(f"  network failure: {self.error}")
            if self.error and "timeout" in self.error:
                lines.append("    (the site was too slow or dropped the request)")
            lines.append(f"  CONCLUSION: {self.conclusion.value}")
            return lines

        lines.append(f"  connected, HTTP {self.status_code}")
        if self.final_url and self.final_url.rstrip("/") != self.site.rstrip("/"):
            lines.append(f"  redirected to {self.final_url}")
        if self.status_code == 403:
            lines.append("    (access forbidden, likely bot protection)")
        if self.error:
            lines.append(f"  {self.error}")
        if self.selected is not None:
            lines.append(f"  extractor would pick {self.selected.kind.value}: {self.selected.url}")
        lines.append(f"  {len(self.checks)} candidate image(s)")
        for check in self.checks:
            lines.append(f"    - {check.line()}")
        lines.append(f"  CONCLUSION: {self.conclusion.value}")
        return lines


class SiteAnalyzer:
    """Verbose static analysis of one site at a time."""

    def __init__(self, fetcher: Fetcher) -> None:
        self.fetcher = fetcher
        self._checked: Dict[str, tuple[Verdict, str, Optional[str]]] = {}

    async def analyze(self, site: str) -> Diagnosis:
        diagnosis = Diagnosis(site=site)
        try:
            document = await self.fetcher.fetch_document(site)
        except NetworkFailure as exc:
            diagnosis.error = exc.reason
            return diagnosis
        except UnsupportedContent as exc:
            diagnosis.error = str(exc)
            diagnosis.conclusion = Conclusion.NOT_HTML
            return diagnosis

        diagnosis.status_code = document.status_code
        diagnosis.final_url = document.final_url
        html = document.body if isinstance(document.body, str) else ""
        candidates = collect_candidates(html, document.final_url)
        diagnosis.selected = find_logo(html, document.final_url)
        if not candidates:
            diagnosis.error = "no icon, og:image or logo image tags in the HTML"
            diagnosis.conclusion = Conclusion.NO_CANDIDATES
            return diagnosis

        for candidate in candidates:
            diagnosis.checks.append(await self.check(candidate))
        ok = any(c.verdict is Verdict.OK for c in diagnosis.checks)
        diagnosis.conclusion = Conclusion.VALID_LOGO_FOUND if ok else Conclusion.NO_VALID_IMAGES
        return diagnosis

    async def check(self, candidate: CandidateReference) -> CandidateCheck:
        if candidate.url is None:
            return CandidateCheck(candidate, Verdict.MALFORMED_URL)
        if candidate.url not in self._checked:
            self._checked[candidate.url] = await self._validate(candidate.url)
        verdict, detail, logo_hash = self._checked[candidate.url]
        return CandidateCheck(candidate, verdict, detail, logo_hash)

    async def _validate(self, url: str) -> tuple[Verdict, str, Optional[str]]:
        try:
            asset = await self.fetcher.fetch_image(url)
        except NetworkFailure as exc:
            return Verdict.DOWNLOAD_FAILED, exc.reason, None
        except UnsupportedContent as exc:
            return Verdict.NOT_AN_IMAGE, str(exc), None
        try:
            logo_hash = await asyncio.to_thread(compute_dhash, asset.data, asset.content_type, asset.length)
        except ImageRejected as exc:
            return Verdict.REJECTED, str(exc), None
        except UnsupportedContent as exc:
            return Verdict.NOT_AN_IMAGE, str(exc), None
        except DecodeFailure as exc:
            return Verdict.DECODE_FAILED, f"{exc}; likely corrupt or an unsupported format", None
        return Verdict.OK, f"{asset.length / 1024:.1f} KB, hash {logo_hash}", logo_hash


def find_missing(sites: Sequence[str], groups: Iterable[Iterable[Dict[str, Any]]]) -> List[str]:
    """Sites of the input that appear in no group, in input order."""
    grouped = {item.get("site") for group in groups for item in group if isinstance(item, dict)}
    return [site for site in sites if site not in grouped]


async def diagnose_sites(config: ScoutConfig, sites: Sequence[str]) -> List[Diagnosis]:
    """Analyse *sites* one after another over a fresh session."""
    async with open_session(config) as session:
        analyzer = SiteAnalyzer(Fetcher(session, config))
        return [await analyzer.analyze(site) for site in sites]
