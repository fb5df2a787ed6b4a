"""SchedulerEngine — the once-a-minute firing loop."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from kairos.config import settings
from kairos.scheduler import recurrence, timeparse

if TYPE_CHECKING:
    from datetime import datetime

    from kairos.scheduler.executor import TaskExecutor
    from kairos.scheduler.models import ScheduledEvent
    from kairos.scheduler.store import EventLedger

logger = logging.getLogger(__name__)

TICK_JOB_ID = "kairos-tick"


def should_fire(event: ScheduledEvent, now: datetime) -> bool:
    """Decide whether *event* is due at *now* (a moment in the scheduler timezone).

    One-time events fire in their own minute, or on any later tick while
    they have never fired (overdue recovery). Recurring events fire when
    their expression matches the current minute.
    """
    if not event.is_active:
        return False
    if event.is_once:
        try:
            instant = timeparse.parse_instant(event.schedule)
        except ValueError:
            logger.warning("Event %s has an unreadable schedule: %r", event.id, event.schedule)
            return False
        if timeparse.is_current_minute(instant, now):
            return True
        return event.fire_count == 0 and timeparse.is_in_past(instant, now)
    if event.is_recurring:
        return recurrence.matches(event.schedule, now)
    return False


class SchedulerEngine:
    """Drives ``tick()`` from an APScheduler cron job.

    Args:
        ledger: EventLedger holding the events.
        executor: TaskExecutor that runs due events.
        timezone: IANA timezone name (default from settings).
    """

    def __init__(
        self,
        ledger: EventLedger,
        executor: TaskExecutor,
        timezone: str | None = None,
    ) -> None:
        self._ledger = ledger
        self._executor = executor
        self._timezone = timezone or settings.scheduler_timezone
        self._scheduler = AsyncIOScheduler(timezone=self._timezone)
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self._timezone)

    # -- Lifecycle -------------------------------------------------------------

    async def start(self) -> None:
        """Register the per-minute tick and start the scheduler."""
        self._scheduler.add_job(
            self.tick,
            trigger=CronTrigger(minute="*", timezone=self._timezone),
            id=TICK_JOB_ID,
            name="firing loop",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._scheduler.start()
        self._running = True
        logger.info("Scheduler started (tz=%s)", self._timezone)

    async def stop(self) -> None:
        """Shut down the scheduler."""
        if self._running:
            self._scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Scheduler stopped")

    # -- Firing ----------------------------------------------------------------

    async def tick(self, now: datetime | None = None) -> list[str]:
        """Fire every due event, in listing order. Returns the IDs fired successfully."""
        current = timeparse.now_local(now, self.tz).replace(second=0, microsecond=0)
        events = await self._ledger.list_active()
        logger.debug("Tick at %s: %d active event(s)", current.isoformat(), len(events))

        fired: list[str] = []
        for event in events:
            try:
                if not should_fire(event, current):
                    continue
                logger.info("Firing event %s: %s", event.id, event.description)
                if await self._executor.execute(event):
                    fired.append(event.id)
            except Exception:
                logger.exception("Tick failed for event %s", event.id)
        return fired
