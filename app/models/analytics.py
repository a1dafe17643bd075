"""Analytics and statistics models for the admin dashboard."""

from typing import Generic, TypeVar
from pydantic import BaseModel
from sqlmodel import SQLModel

T = TypeVar("T")


class DashboardSummary(SQLModel):
    """Headline counters shown on the dashboard cards."""

    total_users: int
    active_users: int
    total_stores: int
    active_stores: int
    total_coupons: int
    active_coupons: int
    expired_coupons: int
    total_categories: int
    total_roles: int


class MonthlyDataPoint(SQLModel):
    """Monthly data point for chart visualization."""

    year: int
    month: int  # 1-12
    count: int


class MonthlyTrends(SQLModel):
    """Creation counts per month, one contiguous ascending series per entity."""

    users: list[MonthlyDataPoint]
    stores: list[MonthlyDataPoint]
    coupons: list[MonthlyDataPoint]


class GroupedCount(SQLModel):
    """Number of records sharing one value of a categorical field."""

    label: str
    count: int


class TopStore(SQLModel):
    """A store ranked by how many times its coupons were used."""

    name: str
    uses: int


class ReportResult(BaseModel, Generic[T]):
    """
    Outcome of a single dashboard report.

    Exactly one of `data` and `error` is set. A failed report carries the error
    message so the dashboard can render an empty chart in its place.
    """

    success: bool
    data: T | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: T) -> "ReportResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, error: BaseException) -> "ReportResult[T]":
        return cls(success=False, error=str(error) or type(error).__name__)


class DashboardSnapshot(BaseModel):
    """Every dashboard report, each one allowed to fail on its own."""

    summary: ReportResult[DashboardSummary]
    monthly_trends: ReportResult[MonthlyTrends]
    coupons_by_status: ReportResult[list[GroupedCount]]
    coupons_by_type: ReportResult[list[GroupedCount]]
    store_status: ReportResult[list[GroupedCount]]
    top_stores: ReportResult[list[TopStore]]
