# logo_scout/extractor/models.py
"""
Transient data models of the extraction stage.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class CandidateKind(str, Enum):
    """Where a logo candidate was found on the page."""

    APPLE_ICON = "apple-touch-icon"
    OG_IMAGE = "og:image"
    FAVICON = "icon"
    SHORTCUT_ICON = "shortcut-icon"
    CLASS_HEURISTIC = "logo-image"
    HOME_LINK = "home-link-image"

    @property
    def is_metadata(self) -> bool:
        return self in _METADATA_KINDS


_METADATA_KINDS = frozenset(
    {CandidateKind.APPLE_ICON, CandidateKind.OG_IMAGE, CandidateKind.FAVICON, CandidateKind.SHORTCUT_ICON}
)


@dataclass(frozen=True, slots=True)
class ExtractionCandidate:
    """A resolved logo URL together with the signal that produced it."""

    kind: CandidateKind
    url: str


@dataclass(slots=True)
class FetchedDocument:
    """Result of one HTTP GET after redirects."""

    final_url: str
    body: Union[str, bytes]
    status_code: int
    content_type: str = ""


@dataclass(slots=True)
class ImageAsset:
    """Downloaded image bytes as served."""

    url: str
    data: bytes
    content_type: str

    @property
    def length(self) -> int:
        return len(self.data)


@dataclass(frozen=True, slots=True)
class CandidateReference:
    """A raw reference found on a page and its resolution (``None`` if malformed)."""

    kind: CandidateKind
    reference: str
    url: Optional[str]
