"""Admin dashboard router exposing the statistics reports."""

from typing import Annotated
from fastapi import APIRouter, Depends, Query

from app.core.config import Settings, get_settings
from app.core.dependencies import get_dashboard_service
from app.models.analytics import (
    DashboardSnapshot,
    DashboardSummary,
    GroupedCount,
    MonthlyTrends,
    TopStore,
)
from app.services.dashboard import DashboardService

router = APIRouter(prefix="/admin/dashboard", tags=["dashboard"])

DashboardServiceDep = Annotated[DashboardService, Depends(get_dashboard_service)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


@router.get("/", response_model=DashboardSnapshot)
async def get_dashboard(
    service: DashboardServiceDep,
    settings: SettingsDep,
    months: Annotated[int | None, Query(ge=1)] = None,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> DashboardSnapshot:
    """
    Retrieve every dashboard report in one call.

    Reports are computed concurrently and fail independently: a report that could not be
    loaded comes back with `success: false` and an `error` message while the others still
    carry their data. The response is 200 even when some reports failed.

    Query parameters default to `TREND_MONTHS` and `TOP_STORES_LIMIT`.
    """
    return await service.get_dashboard(
        months=months or settings.TREND_MONTHS,
        limit=limit or settings.TOP_STORES_LIMIT,
    )


@router.get("/summary", response_model=DashboardSummary)
async def get_summary(service: DashboardServiceDep) -> DashboardSummary:
    """
    Retrieve the headline counters for the dashboard cards.

    Example response:
        {
            "total_users": 42, "active_users": 40,
            "total_stores": 12, "active_stores": 11,
            "total_coupons": 230, "active_coupons": 180, "expired_coupons": 50,
            "total_categories": 9, "total_roles": 3
        }
    """
    return await service.get_summary()


@router.get("/trends", response_model=MonthlyTrends)
async def get_monthly_trends(
    service: DashboardServiceDep,
    settings: SettingsDep,
    months: Annotated[int | None, Query(ge=1)] = None,
) -> MonthlyTrends:
    """
    Retrieve users, stores and coupons created per month.

    Every series holds exactly `months` points, oldest first, ending at the current month.
    Months without records are present with a count of 0.
    """
    return await service.get_monthly_trends(months or settings.TREND_MONTHS)


@router.get("/coupons/status", response_model=list[GroupedCount])
async def get_coupons_by_status(service: DashboardServiceDep) -> list[GroupedCount]:
    """Retrieve coupon counts per status (active, expired)."""
    return await service.get_coupons_by_status()


@router.get("/coupons/type", response_model=list[GroupedCount])
async def get_coupons_by_type(service: DashboardServiceDep) -> list[GroupedCount]:
    """Retrieve coupon counts per type (deal, coupon)."""
    return await service.get_coupons_by_type()


@router.get("/stores/status", response_model=list[GroupedCount])
async def get_store_status_counts(service: DashboardServiceDep) -> list[GroupedCount]:
    """Retrieve active versus inactive store counts."""
    return await service.get_store_status_counts()


@router.get("/stores/top", response_model=list[TopStore])
async def get_top_stores(
    service: DashboardServiceDep,
    settings: SettingsDep,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> list[TopStore]:
    """Retrieve the stores with the most coupon uses, highest first."""
    return await service.get_top_stores(limit or settings.TOP_STORES_LIMIT)
