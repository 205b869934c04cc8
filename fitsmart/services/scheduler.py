"""APScheduler job for hourly hydration reminders."""

import logging
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from fitsmart.config import Settings, get_settings
from fitsmart.models.profile import UserProfile
from fitsmart.models.tracking import HydrationReminder
from fitsmart.services.tracker import HydrationTracker, local_clock
from fitsmart.store import kv
from fitsmart.store.kv import KeyValueStore


logger = logging.getLogger(__name__)


class ReminderScheduler:
    """Scheduled hydration reminders written to the tracking store."""

    def __init__(self, store: KeyValueStore, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.store = store
        self.clock = local_clock(self.settings.timezone)
        self.hydration = HydrationTracker(
            store,
            clock=self.clock,
            reminder_hours=(self.settings.reminder_start_hour, self.settings.reminder_end_hour),
        )
        self.scheduler = AsyncIOScheduler(timezone=self.settings.timezone)

    def start(self) -> None:
        """Start the scheduler with the hourly water reminder."""
        start, end = self.hydration.reminder_hours
        self.scheduler.add_job(
            self.check_hydration,
            CronTrigger(hour=f"{start}-{end}", minute=0),
            id="water_reminders",
            replace_existing=True,
        )
        self.scheduler.start()
        logger.info("Reminder scheduler started (%02d:00-%02d:00 %s)", start, end, self.settings.timezone)

    def stop(self) -> None:
        """Stop the scheduler."""
        self.scheduler.shutdown(wait=False)
        logger.info("Reminder scheduler stopped")

    def check_hydration(self, now: Optional[datetime] = None) -> Optional[HydrationReminder]:
        """Store a reminder when the user is behind on water."""
        now = now or self.clock()
        data = self.store.get(kv.USER_PROFILE)
        if data is None:
            return None

        goal = UserProfile.model_validate(data).water_goal
        if not self.hydration.needs_reminder(now.hour, goal):
            return None

        remaining = goal - self.hydration.intake
        reminder = HydrationReminder(
            message=f"Time to drink water! {remaining} glass(es) left to reach your goal.",
            remaining=remaining,
            created_at=now.isoformat(),
        )
        self.store.set(kv.HYDRATION_REMINDER, reminder.model_dump(by_alias=True))
        logger.info("Hydration reminder: %s cups remaining", remaining)
        return reminder
