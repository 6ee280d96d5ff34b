"""
ConcurrentPopulator: computes every week of a year with bounded concurrency.

A pass publishes an empty skeleton first, then one task per week fetches that
week's tracking records and aggregates them. A semaphore bounds how many
weeks hit the data source at once. Weeks publish as they finish, in no
particular order.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .aggregator import WeeklyAggregator
from .board import WeekBoard, WeekResult
from .config import EngineConfig
from .errors import PopulationError
from .loader import DataSource
from .schedule_index import ScheduleIndex
from .status_resolver import StatusResolver
from .week_calendar import first_date_of_week, weeks_in_year

logger = logging.getLogger(__name__)


class CancellationToken:
    """Thread-safe cancellation signal with callbacks fired once on cancel."""

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def register(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Run callback on cancel (immediately if already cancelled). Returns an unregister function."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)

                def unregister() -> None:
                    with self._lock:
                        if callback in self._callbacks:
                            self._callbacks.remove(callback)

                return unregister
        callback()
        return lambda: None


@dataclass
class PopulationResult:
    """Outcome of one population pass."""

    year: int
    weeks: int
    published: List[int] = field(default_factory=list)
    failed_weeks: List[int] = field(default_factory=list)
    cancelled: bool = False

    @property
    def complete(self) -> bool:
        return not self.cancelled and len(self.published) == self.weeks


class ConcurrentPopulator:
    """Fills a WeekBoard with every week of a year."""

    def __init__(
        self,
        source: DataSource,
        resolver: Optional[StatusResolver] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.source = source
        self.config = config or EngineConfig()
        self.aggregator = WeeklyAggregator(resolver or StatusResolver())

    async def populate(
        self,
        year: int,
        board: WeekBoard,
        cancel: Optional[CancellationToken] = None,
    ) -> PopulationResult:
        """
        Populate `board` with every week of `year`.

        Raises PopulationError if the year's schedules cannot be loaded.
        Per-week fetch or aggregation failures are published as UNKNOWN weeks instead.
        """
        cancel = cancel or CancellationToken()
        total = weeks_in_year(year)
        result = PopulationResult(year=year, weeks=total)
        board.start(year, total)

        try:
            schedules = await self.source.get_schedules(year)
        except Exception as e:
            logger.error("Cannot load schedules for %d: %s", year, e)
            board.fail()
            raise PopulationError(year, str(e)) from e

        index = ScheduleIndex(year, schedules)
        logger.info(
            "Populating %d: %d weeks, %d schedules, concurrency %d",
            year,
            total,
            len(index),
            self.config.concurrency_limit,
        )

        loop = asyncio.get_running_loop()
        stop = asyncio.Event()
        unregister = cancel.register(lambda: loop.call_soon_threadsafe(stop.set))
        semaphore = asyncio.Semaphore(self.config.concurrency_limit)
        tasks = [
            asyncio.ensure_future(
                self._populate_week(index, week, board, cancel, semaphore, result)
            )
            for week in range(1, total + 1)
        ]
        stopper = asyncio.ensure_future(stop.wait())
        all_weeks = asyncio.gather(*tasks, return_exceptions=True)
        try:
            await asyncio.wait({all_weeks, stopper}, return_when=asyncio.FIRST_COMPLETED)
            if not all_weeks.done():
                for task in tasks:
                    task.cancel()
            outcomes = await all_weeks
        finally:
            unregister()
            stopper.cancel()
            for task in tasks:
                if not task.done():
                    task.cancel()

        for outcome in outcomes:
            if isinstance(outcome, Exception):
                board.fail()
                raise outcome

        if cancel.cancelled:
            result.cancelled = True
            logger.info(
                "Population of %d cancelled after %d of %d weeks",
                year,
                len(result.published),
                total,
            )
            board.cancel()
        else:
            logger.info(
                "Population of %d complete: %d weeks, %d unknown",
                year,
                total,
                len(result.failed_weeks),
            )
            board.complete()
        return result

    async def _populate_week(
        self,
        index: ScheduleIndex,
        week: int,
        board: WeekBoard,
        cancel: CancellationToken,
        semaphore: asyncio.Semaphore,
        result: PopulationResult,
    ) -> None:
        year = index.year
        async with semaphore:
            if cancel.cancelled:
                return
            try:
                records = await asyncio.wait_for(
                    self.source.get_tracking_records(year, week),
                    timeout=self.config.fetch_timeout_seconds,
                )
                statuses = self.aggregator.aggregate(index, week, records)
            except Exception as e:
                logger.warning(
                    "Week %d of %d: tracking data unusable (%s: %s); marking unknown",
                    week,
                    year,
                    type(e).__name__,
                    e,
                )
                week_result = WeekResult(
                    year,
                    week,
                    first_date_of_week(year, week),
                    self.aggregator.unknown_week(index, week),
                    loaded=True,
                    failed=True,
                )
            else:
                week_result = WeekResult(
                    year,
                    week,
                    first_date_of_week(year, week),
                    statuses,
                    loaded=True,
                )

        if cancel.cancelled:
            return
        board.publish(week_result)
        result.published.append(week)
        if week_result.failed:
            result.failed_weeks.append(week)
