# logo_scout/scheduler.py
"""
Bounded admission of per-site workers.

At most ``limit`` workers are in flight; admission of the next site waits
until any in-flight worker finishes. Results arrive in completion order and
are keyed by input item.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Dict, Generic, Hashable, Iterable, Optional, Set, TypeVar

from logo_scout.logger import get_logger

__all__ = ["BoundedScheduler"]

T = TypeVar("T", bound=Hashable)
R = TypeVar("R")

Worker = Callable[[T], Awaitable[Optional[R]]]
CompletionHook = Callable[[T, Optional[R]], None]


class BoundedScheduler(Generic[T, R]):
    """Run an async worker over many items with a fixed concurrency ceiling."""

    def __init__(self, limit: int, on_complete: Optional[CompletionHook] = None) -> None:
        if limit < 1:
            raise ValueError("concurrency limit must be >= 1")
        self.limit = limit
        self.on_complete = on_complete
        self.logger = get_logger("scheduler")

    async def run(self, items: Iterable[T], worker: Worker) -> Dict[T, R]:
        """Run *worker* over *items*; return the non-``None`` results by item.

        Items are admitted in order. Workers are expected to turn their own
        failures into ``None``; an exception escaping a worker is logged and
        counted as ``None`` so the batch continues.
        """
        results: Dict[T, R] = {}
        in_flight: Set[asyncio.Task] = set()
        owners: Dict[asyncio.Task, T] = {}

        def _collect(done: Iterable[asyncio.Task]) -> None:
            for task in done:
                item = owners.pop(task)
                try:
                    result = task.result()
                except Exception:
                    self.logger.exception("Worker crashed on %s", item)
                    result = None
                if result is not None:
                    results[item] = result
                if self.on_complete is not None:
                    self.on_complete(item, result)

        try:
            for item in items:
                if len(in_flight) >= self.limit:
                    done, in_flight = await asyncio.wait(in_flight, return_when=asyncio.FIRST_COMPLETED)
                    _collect(done)
                task = asyncio.create_task(worker(item))
                owners[task] = item
                in_flight.add(task)

            while in_flight:
                done, in_flight = await asyncio.wait(in_flight, return_when=asyncio.FIRST_COMPLETED)
                _collect(done)
        finally:
            if in_flight:
                # interrupted: let admitted sites finish instead of abandoning them
                self.logger.warning("Waiting for %d in-flight sites before shutdown", len(in_flight))
                await asyncio.gather(*in_flight, return_exceptions=True)

        return results
