# backend/services/notification_scheduler.py
"""
Periodic admin notifications.

Uses APScheduler to re-run the pending-count queries on a fixed interval and
push the result to every socket in the admin group. The full list is resent
on every tick; a failed tick is logged and skipped.
"""

import logging
from typing import Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from queries import admin_queries
from services.broadcaster import Broadcaster, ADMIN_GROUP

logger = logging.getLogger(__name__)


class NotificationScheduler:
    def __init__(self, broadcaster: Broadcaster, session_factory: Callable[[], Session], interval_seconds: int = 30):
        self.broadcaster = broadcaster
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self.scheduler = AsyncIOScheduler()

    def start(self):
        self.scheduler.add_job(
            self.tick,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id="admin_notifications",
            name="Admin notification broadcast",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.start()
        logger.info(f"Notification scheduler started. Broadcasting every {self.interval_seconds}s")

    async def shutdown(self):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        logger.info("Notification scheduler stopped")

    def _snapshot(self):
        db = self.session_factory()
        try:
            counts = admin_queries.get_notification_counts(db)
            stats = admin_queries.get_realtime_stats(db)
            return admin_queries.build_notifications(counts), stats
        finally:
            db.close()

    async def tick(self) -> bool:
        try:
            notifications, stats = await run_in_threadpool(self._snapshot)
            await self.broadcaster.publish(ADMIN_GROUP, "notificationUpdate", notifications)
            await self.broadcaster.publish(ADMIN_GROUP, "statsUpdate", stats)
        except Exception as e:
            logger.error(f"Skipping notification tick: {e}", exc_info=True)
            return False
        logger.debug(f"Notification tick sent {len(notifications)} notifications")
        return True
