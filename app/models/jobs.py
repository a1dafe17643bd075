"""Models describing the coupon usage reset job for the internal admin API."""

from datetime import datetime
from enum import Enum
from sqlmodel import SQLModel


class SchedulerState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class SchedulerStatus(SQLModel):
    """Current lifecycle state of the reset scheduler."""

    state: SchedulerState
    timezone: str
    next_run_time: datetime | None = None


class ResetRunResult(SQLModel):
    """Outcome of a manually triggered coupon usage reset."""

    affected: int
    ran_at: datetime
