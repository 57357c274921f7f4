# logo_scout/models.py
"""
Data models shared by the scheduler, clusterer and reports.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from logo_scout.extractor.models import CandidateKind


class Method(str, Enum):
    """How the logo URL of a site was discovered."""

    STATIC_TIER1 = "static-tier1"
    STATIC_TIER2 = "static-tier2"
    DYNAMIC = "dynamic"

    @classmethod
    def for_static(cls, kind: CandidateKind) -> "Method":
        return cls.STATIC_TIER1 if kind.is_metadata else cls.STATIC_TIER2


class Outcome(str, Enum):
    """Per-site outcome tag handed to the statistics collector."""

    SUCCESS_STATIC_TIER1 = "success-static-tier1"
    SUCCESS_STATIC_TIER2 = "success-static-tier2"
    SUCCESS_DYNAMIC = "success-dynamic"
    NO_LOGO = "no-logo"
    HASH_FAILED = "hash-failed"
    ERROR = "error"

    @classmethod
    def success(cls, method: Method) -> "Outcome":
        return _SUCCESS_BY_METHOD[method]

    @property
    def is_success(self) -> bool:
        return self in _SUCCESS_BY_METHOD.values()


_SUCCESS_BY_METHOD: Dict[Method, Outcome] = {
    Method.STATIC_TIER1: Outcome.SUCCESS_STATIC_TIER1,
    Method.STATIC_TIER2: Outcome.SUCCESS_STATIC_TIER2,
    Method.DYNAMIC: Outcome.SUCCESS_DYNAMIC,
}


@dataclass(frozen=True, slots=True)
class SiteRecord:
    """A successfully processed site: its logo URL and the logo's dHash."""

    site: str
    logo_url: str
    hash: str
    method: Method

    def as_dict(self) -> Dict[str, str]:
        return {"site": self.site, "logoUrl": self.logo_url, "hash": self.hash}


@dataclass(frozen=True, slots=True)
class SiteOutcome:
    site: str
    outcome: Outcome
    record: Optional[SiteRecord] = None


Group = List[SiteRecord]
