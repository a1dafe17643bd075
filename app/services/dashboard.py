"""Dashboard aggregation service for admin statistics.

Each report is an independent coroutine built from metric repository calls.
Repository calls are blocking database round-trips, so they run in worker
threads and are bounded by the service timeout.
"""

import asyncio
from collections import Counter
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, TypeVar

from loguru import logger

from app.exceptions import ReportTimeoutError, ValidationError
from app.models.analytics import (
    DashboardSnapshot,
    DashboardSummary,
    GroupedCount,
    MonthlyDataPoint,
    MonthlyTrends,
    TopStore,
)
from app.models.enums import CouponStatus
from app.repositories.metrics import MetricEntity, MetricRepository
from app.utils.dates import month_window, utc_now

R = TypeVar("R")

DEFAULT_TREND_MONTHS = 6
DEFAULT_TOP_STORES_LIMIT = 10

TREND_ENTITIES = (MetricEntity.USER, MetricEntity.STORE, MetricEntity.COUPON)


def format_group_label(value: Any) -> str:
    """
    Turn a raw grouped value into the label displayed on the chart.

    Booleans become "Active"/"Inactive", enum members their value and a missing value "Unknown".
    """
    if isinstance(value, bool):
        return "Active" if value else "Inactive"
    if isinstance(value, Enum):
        return str(value.value)
    if value is None:
        return "Unknown"
    return str(value)


def fill_monthly_buckets(
    buckets: list[tuple[int, int, int]], window: list[tuple[int, int]]
) -> list[MonthlyDataPoint]:
    """
    Lay month buckets over a contiguous window.

    Parameters:
        buckets: `(year, month, count)` triples in any order, possibly with gaps.
        window: Ascending `(year, month)` pairs to report on.

    Returns:
        list[MonthlyDataPoint]: One point per window month, 0 where the month had no bucket. Buckets outside the window are dropped.
    """
    counts: Counter[tuple[int, int]] = Counter()
    for year, month, count in buckets:
        counts[(year, month)] += count
    return [
        MonthlyDataPoint(year=year, month=month, count=counts[(year, month)])
        for year, month in window
    ]


class DashboardService:
    """Computes the admin dashboard reports from a metric repository."""

    def __init__(self, repository: MetricRepository, timeout: float | None = None):
        """
        Parameters:
            repository: Source of the aggregate reads.
            timeout: Seconds allowed for each repository call; None waits indefinitely.
        """
        self.repository = repository
        self.timeout = timeout

    async def _call(
        self, report: str, query: Callable[..., R], *args: Any
    ) -> R:
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(query, *args), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"Report '{report}' timed out after {self.timeout}s")
            raise ReportTimeoutError(report, self.timeout or 0) from e

    async def get_summary(self) -> DashboardSummary:
        """
        Get the headline counters for the dashboard cards.

        The nine counts are independent and issued concurrently.

        Returns:
            DashboardSummary: Totals and active counts for users, stores and coupons, plus category and role counts.
        """
        count = self.repository.count
        (
            total_users,
            active_users,
            total_stores,
            active_stores,
            total_coupons,
            active_coupons,
            expired_coupons,
            total_categories,
            total_roles,
        ) = await asyncio.gather(
            self._call("summary", count, MetricEntity.USER),
            self._call("summary", count, MetricEntity.USER, {"is_active": True}),
            self._call("summary", count, MetricEntity.STORE),
            self._call("summary", count, MetricEntity.STORE, {"is_active": True}),
            self._call("summary", count, MetricEntity.COUPON),
            self._call(
                "summary", count, MetricEntity.COUPON, {"status": CouponStatus.ACTIVE}
            ),
            self._call(
                "summary", count, MetricEntity.COUPON, {"status": CouponStatus.EXPIRED}
            ),
            self._call("summary", count, MetricEntity.CATEGORY),
            self._call("summary", count, MetricEntity.ROLE),
        )
        return DashboardSummary(
            total_users=total_users,
            active_users=active_users,
            total_stores=total_stores,
            active_stores=active_stores,
            total_coupons=total_coupons,
            active_coupons=active_coupons,
            expired_coupons=expired_coupons,
            total_categories=total_categories,
            total_roles=total_roles,
        )

    async def get_monthly_trends(
        self, months: int = DEFAULT_TREND_MONTHS, now: datetime | None = None
    ) -> MonthlyTrends:
        """
        Get user, store and coupon creation counts per month.

        The window starts on the first day of the month `months - 1` months before the current one,
        so both the first and the current month are counted in full.

        Args:
            months: Number of months to include (default: 6)
            now: Reference instant in UTC, defaults to the current time

        Returns:
            MonthlyTrends: Exactly `months` ascending, contiguous points per entity, zero-filled.

        Raises:
            ValidationError: If `months` is lower than 1.
        """
        if months < 1:
            raise ValidationError("months must be at least 1", field="months")

        window = month_window(now or utc_now(), months)
        first_year, first_month = window[0]
        since = datetime(first_year, first_month, 1, tzinfo=timezone.utc)

        users, stores, coupons = await asyncio.gather(
            *(
                self._call("monthly_trends", self.repository.bucket_by_month, entity, since)
                for entity in TREND_ENTITIES
            )
        )
        return MonthlyTrends(
            users=fill_monthly_buckets(users, window),
            stores=fill_monthly_buckets(stores, window),
            coupons=fill_monthly_buckets(coupons, window),
        )

    async def get_grouped_counts(
        self, entity: MetricEntity, field: str
    ) -> list[GroupedCount]:
        """
        Count records of an entity per value of a categorical field.

        Returns:
            list[GroupedCount]: One entry per observed value, largest first.
        """
        rows = await self._call(
            f"{entity.value}.{field}", self.repository.group_by_field, entity, field
        )
        groups = [
            GroupedCount(label=format_group_label(value), count=count)
            for value, count in rows
        ]
        return sorted(groups, key=lambda g: (-g.count, g.label))

    async def get_coupons_by_status(self) -> list[GroupedCount]:
        return await self.get_grouped_counts(MetricEntity.COUPON, "status")

    async def get_coupons_by_type(self) -> list[GroupedCount]:
        return await self.get_grouped_counts(MetricEntity.COUPON, "coupon_type")

    async def get_store_status_counts(self) -> list[GroupedCount]:
        return await self.get_grouped_counts(MetricEntity.STORE, "is_active")

    async def get_top_stores(
        self, limit: int = DEFAULT_TOP_STORES_LIMIT
    ) -> list[TopStore]:
        """
        Get the stores whose coupons were used the most.

        Raises:
            ValidationError: If `limit` is lower than 1.
        """
        if limit < 1:
            raise ValidationError("limit must be at least 1", field="limit")

        rows = await self._call(
            "top_stores",
            self.repository.top_n_by_field,
            MetricEntity.STORE,
            "total_coupon_used_times",
            limit,
        )
        stores = [TopStore(name=name, uses=uses) for name, uses in rows]
        return sorted(stores, key=lambda s: s.uses, reverse=True)[:limit]

    async def get_dashboard(
        self,
        months: int = DEFAULT_TREND_MONTHS,
        limit: int = DEFAULT_TOP_STORES_LIMIT,
    ) -> DashboardSnapshot:
        """
        Compute every dashboard report concurrently.

        A failing report is captured in its own ReportResult and never fails the others.

        Returns:
            DashboardSnapshot: One success-or-error result per report.
        """
        reports = {
            "summary": self.get_summary(),
            "monthly_trends": self.get_monthly_trends(months),
            "coupons_by_status": self.get_coupons_by_status(),
            "coupons_by_type": self.get_coupons_by_type(),
            "store_status": self.get_store_status_counts(),
            "top_stores": self.get_top_stores(limit),
        }
        outcomes = await asyncio.gather(*reports.values(), return_exceptions=True)

        results = {}
        for name, outcome in zip(reports, outcomes):
            result_type = DashboardSnapshot.model_fields[name].annotation
            if isinstance(outcome, Exception):
                logger.warning(f"Dashboard report '{name}' failed: {outcome}")
                results[name] = result_type.failed(outcome)  # type: ignore[union-attr]
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results[name] = result_type.ok(outcome)  # type: ignore[union-attr]
        return DashboardSnapshot(**results)
