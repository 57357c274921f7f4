# File: logo_scout/engine.py
"""logo_scout.engine: orchestration of one run, from site list to logo groups."""

from __future__ import annotations

import time
from contextlib import AsyncExitStack
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from logo_scout.aggregator import RunStats
from logo_scout.clusterer import cluster
from logo_scout.config import ScoutConfig
from logo_scout.extractor.dynamic import RenderEngine
from logo_scout.extractor.fetcher import Fetcher, open_session
from logo_scout.logger import logger
from logo_scout.models import Group, Outcome, SiteOutcome, SiteRecord
from logo_scout.pipeline import SitePipeline
from logo_scout.scheduler import BoundedScheduler

__all__ = ["RunResult", "start_run", "order_records"]


@dataclass(slots=True)
class RunResult:
    """Everything a run produces: input order, records, groups and statistics."""

    sites: List[str]
    records: List[SiteRecord] = field(default_factory=list)
    groups: List[Group] = field(default_factory=list)
    stats: RunStats = field(default_factory=RunStats)
    duration: float = 0.0

    def missing_sites(self) -> List[str]:
        found = {r.site for r in self.records}
        return [s for s in self.sites if s not in found]


def order_records(sites: Sequence[str], outcomes: Dict[str, SiteOutcome]) -> List[SiteRecord]:
    """Records in input order, so grouping does not depend on completion order."""
    records: List[SiteRecord] = []
    for site in sites:
        outcome = outcomes.get(site)
        if outcome is not None and outcome.record is not None:
            records.append(outcome.record)
    return records


async def start_run(
    config: ScoutConfig,
    sites: Sequence[str],
    *,
    render_engine: Callable[[], RenderEngine] = RenderEngine,
) -> RunResult:
    """Process *sites* and group their logos.

    The headless browser is launched before any site is admitted; a launch
    failure aborts the run. Session and browser are released however the run
    ends.
    """
    sites = list(sites)
    result = RunResult(sites=sites, stats=RunStats(total=len(sites)))
    start = time.monotonic()
    logger.info("Processing %d sites (concurrency %d)", len(sites), config.concurrency)

    def _on_complete(site: str, outcome: Optional[SiteOutcome]) -> None:
        # a worker that raised reports no outcome
        result.stats.record(outcome.outcome if outcome is not None else Outcome.ERROR)
        done = result.stats.processed
        if done % config.progress_every == 0 or done == len(sites):
            logger.info("[%d/%d] sites processed, %d logos hashed", done, len(sites), result.stats.successes)

    async with AsyncExitStack() as stack:
        browser = None
        if config.dynamic_fallback:
            browser = await stack.enter_async_context(render_engine())
        session = await stack.enter_async_context(open_session(config))
        pipeline = SitePipeline(config, Fetcher(session, config), browser)
        scheduler: BoundedScheduler[str, SiteOutcome] = BoundedScheduler(config.concurrency, on_complete=_on_complete)
        outcomes = await scheduler.run(sites, pipeline.process)

    result.records = order_records(sites, outcomes)
    result.groups = cluster(result.records, config.threshold)
    result.stats.groups = len(result.groups)
    result.duration = time.monotonic() - start
    logger.info(
        "Done: %d/%d logos hashed, %d groups, %.1f s",
        result.stats.successes,
        len(sites),
        len(result.groups),
        result.duration,
    )
    return result

