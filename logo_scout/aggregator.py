# File: logo_scout/aggregator.py
"""logo_scout.aggregator: outcome counting and the human-readable run report."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Dict, Iterable

from logo_scout.models import Outcome, SiteOutcome

_LABELS: Dict[Outcome, str] = {
    Outcome.SUCCESS_STATIC_TIER1: "Static, metadata tags",
    Outcome.SUCCESS_STATIC_TIER2: "Static, DOM heuristics",
    Outcome.SUCCESS_DYNAMIC: "Headless render",
    Outcome.NO_LOGO: "No logo found",
    Outcome.HASH_FAILED: "Download / hash failed",
    Outcome.ERROR: "Unexpected error",
}


@dataclass(slots=True)
class RunStats:
    """Counts of per-site outcome tags for one run."""

    counts: Dict[Outcome, int] = field(default_factory=lambda: {o: 0 for o in Outcome})
    total: int = 0
    groups: int = 0

    def record(self, outcome: Outcome) -> None:
        self.counts[outcome] += 1

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[SiteOutcome], total: int) -> RunStats:
        stats = cls(total=total)
        for item in outcomes:
            stats.record(item.outcome)
        return stats

    @property
    def processed(self) -> int:
        return sum(self.counts.values())

    @property
    def successes(self) -> int:
        return sum(n for o, n in self.counts.items() if o.is_success)

    @property
    def failures(self) -> int:
        return self.total - self.successes

    @property
    def success_rate(self) -> float:
        return self.successes / self.total * 100 if self.total else 0.0

    def as_dict(self) -> Dict[str, object]:
        return {
            "total": self.total,
            "successes": self.successes,
            "failures": self.failures,
            "success_rate": round(self.success_rate, 2),
            "groups": self.groups,
            "outcomes": {o.value: n for o, n in self.counts.items()},
        }

    def json(self, *, pretty: bool = False) -> str:
        return json.dumps(self.as_dict(), ensure_ascii=False, indent=2 if pretty else None)

    def render(self) -> str:
        """Plain-text report for the console or ``--stats`` file."""
        lines = [
            "LogoScout run report",
            "====================",
            f"Sites in input:   {self.total}",
            f"Logos hashed:     {self.successes} ({self.success_rate:.1f}%)",
            f"Failed / missing: {self.failures}",
            f"Groups:           {self.groups}",
            "",
            "By outcome:",
        ]
        width = max(len(label) for label in _LABELS.values())
        for outcome in Outcome:
            lines.append(f"  {_LABELS[outcome]:<{width}}  {self.counts[outcome]}")
        return "\n".join(lines) + "\n"
