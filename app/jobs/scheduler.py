"""Daily scheduler for the coupon usage reset.

One scheduler object is built at application startup and kept on
``app.state``. It owns a single APScheduler background scheduler holding a
single cron job, so the reset runs at most once per trigger instant no matter
how many times ``start()`` is called.
"""

import threading
from datetime import datetime
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from loguru import logger
from opentelemetry import metrics

from app.exceptions import ResetJobError
from app.models.jobs import SchedulerState

meter = metrics.get_meter(__name__)
reset_records_counter = meter.create_counter(
    "coupon_usage_reset.records",
    unit="1",
    description="Coupons whose usage counter was zeroed by the reset job",
)
reset_failures_counter = meter.create_counter(
    "coupon_usage_reset.failures",
    unit="1",
    description="Coupon usage reset runs that failed",
)


class CouponUsageResetScheduler:
    """Runs the coupon usage reset every day at midnight."""

    JOB_ID = "coupon_usage_reset"

    def __init__(
        self,
        reset_job: Callable[[], int],
        timezone: str = "UTC",
        hour: int = 0,
        minute: int = 0,
    ):
        """
        Parameters:
            reset_job: Callable performing the reset and returning the number of coupons changed.
            timezone: Timezone the trigger time is expressed in.
            hour: Trigger hour, midnight by default.
            minute: Trigger minute.
        """
        self.reset_job = reset_job
        self.timezone = timezone
        self.hour = hour
        self.minute = minute
        self._lock = threading.Lock()
        self._state = SchedulerState.STOPPED
        self._scheduler: BackgroundScheduler | None = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == SchedulerState.RUNNING

    @property
    def next_run_time(self) -> datetime | None:
        scheduler = self._scheduler
        if scheduler is None:
            return None
        job = scheduler.get_job(self.JOB_ID)
        return job.next_run_time if job else None

    def scheduled_job_count(self) -> int:
        scheduler = self._scheduler
        return len(scheduler.get_jobs()) if scheduler else 0

    def start(self) -> None:
        """
        Install the daily trigger.

        Calling it while already running does nothing, so a second timer is never created.
        """
        with self._lock:
            if self._state == SchedulerState.RUNNING:
                logger.info("Coupon usage reset job is already running.")
                return

            scheduler = BackgroundScheduler(timezone=self.timezone)
            scheduler.add_job(
                self.run_once,
                trigger=CronTrigger(
                    hour=self.hour, minute=self.minute, timezone=self.timezone
                ),
                id=self.JOB_ID,
                name="Coupon usage reset",
                replace_existing=True,
                max_instances=1,
                coalesce=True,
            )
            scheduler.start()
            self._scheduler = scheduler
            self._state = SchedulerState.RUNNING
            logger.info(
                f"Coupon usage reset job started - runs daily at "
                f"{self.hour:02d}:{self.minute:02d} {self.timezone}."
            )

    def stop(self) -> None:
        """Cancel the daily trigger. Does nothing when already stopped."""
        with self._lock:
            if self._state == SchedulerState.STOPPED:
                logger.info("Coupon usage reset job is not running.")
                return

            if self._scheduler is not None:
                # A reset already in progress finishes on its own thread
                self._scheduler.shutdown(wait=False)
            self._scheduler = None
            self._state = SchedulerState.STOPPED
            logger.info("Coupon usage reset job stopped.")

    def run_once(self) -> int | None:
        """
        Run the reset job once, synchronously.

        Failures are logged and swallowed so that the next scheduled tick still happens;
        there is no retry within the same tick.

        Returns:
            int | None: Number of coupons changed, or None if the run failed.
        """
        try:
            affected = self.reset_job()
        except ResetJobError as e:
            reset_failures_counter.add(1)
            logger.error(f"Failed to reset coupon uses: {e}")
            return None
        except Exception as e:
            reset_failures_counter.add(1)
            logger.opt(exception=e).critical(f"Unexpected coupon usage reset failure: {e}")
            return None

        reset_records_counter.add(affected)
        logger.info(f"Reset 'uses' for {affected} coupons.")
        return affected
