from typing import Annotated

from fastapi import APIRouter, Depends
from loguru import logger
from sqlmodel import Session

from app.core.dependencies import get_reset_scheduler
from app.database.database import get_session
from app.jobs.scheduler import CouponUsageResetScheduler
from app.models.jobs import ResetRunResult, SchedulerStatus
from app.services.coupon_usage import reset_coupon_usage
from app.utils.dates import utc_now

router = APIRouter(
    prefix="/internal/admin/jobs", tags=["Internal Admin"], include_in_schema=False
)

SchedulerDep = Annotated[CouponUsageResetScheduler, Depends(get_reset_scheduler)]


def _status(scheduler: CouponUsageResetScheduler) -> SchedulerStatus:
    return SchedulerStatus(
        state=scheduler.state,
        timezone=scheduler.timezone,
        next_run_time=scheduler.next_run_time,
    )


@router.get("/coupon-usage-reset", response_model=SchedulerStatus)
def get_reset_job_status(scheduler: SchedulerDep):
    return _status(scheduler)


@router.post("/coupon-usage-reset/start", response_model=SchedulerStatus)
def start_reset_job(scheduler: SchedulerDep):
    # Starting twice keeps the single existing trigger
    scheduler.start()
    return _status(scheduler)


@router.post("/coupon-usage-reset/stop", response_model=SchedulerStatus)
def stop_reset_job(scheduler: SchedulerDep):
    scheduler.stop()
    return _status(scheduler)


@router.post("/coupon-usage-reset/run", response_model=ResetRunResult)
def run_reset_job(session: Annotated[Session, Depends(get_session)]):
    """
    Reset every coupon's usage counter right now, outside the daily schedule.

    Unlike a scheduled tick, a failure is reported to the caller (503).
    """
    affected = reset_coupon_usage(session)
    logger.info(f"Manual coupon usage reset changed {affected} coupons.")
    return ResetRunResult(affected=affected, ran_at=utc_now())
