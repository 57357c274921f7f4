# File: logo_scout/extractor/__init__.py
"""logo_scout.extractor: logo discovery from static HTML and rendered pages."""

from .dynamic import RenderEngine, extract_dynamic
from .fetcher import Fetcher, open_session
from .models import CandidateKind, CandidateReference, ExtractionCandidate, FetchedDocument, ImageAsset
from .static import collect_candidates, extract_static, find_logo

__all__ = [
    "CandidateKind",
    "CandidateReference",
    "ExtractionCandidate",
    "FetchedDocument",
    "ImageAsset",
    "Fetcher",
    "open_session",
    "find_logo",
    "collect_candidates",
    "extract_static",
    "RenderEngine",
    "extract_dynamic",
]
