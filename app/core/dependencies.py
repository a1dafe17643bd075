from typing import Annotated
from fastapi import Depends, Request
from sqlalchemy import Engine

from app.core.config import Settings, get_settings
from app.database.database import get_engine
from app.jobs.scheduler import CouponUsageResetScheduler
from app.repositories.metrics import SQLMetricRepository
from app.services.dashboard import DashboardService


def get_dashboard_service(
    engine: Annotated[Engine, Depends(get_engine)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> DashboardService:
    """
    Build the dashboard service for a request.

    Returns:
        DashboardService: Service reading through a SQLMetricRepository on the application engine, with each query bounded by `REPORT_TIMEOUT_SECONDS`.
    """
    return DashboardService(
        SQLMetricRepository(engine), timeout=settings.REPORT_TIMEOUT_SECONDS
    )


def get_reset_scheduler(request: Request) -> CouponUsageResetScheduler:
    """
    Return the coupon usage reset scheduler created during application startup.
    """
    return request.app.state.reset_scheduler
