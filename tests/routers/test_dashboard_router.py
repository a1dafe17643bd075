"""Tests for dashboard router endpoints."""

from datetime import datetime, timezone
import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_dashboard_service
from app.main import app
from app.models.enums import CouponStatus, CouponType
from app.repositories.metrics import SQLMetricRepository
from app.services.dashboard import DashboardService
from app.utils.dates import utc_now

SNAPSHOT_REPORTS = (
    "summary",
    "monthly_trends",
    "coupons_by_status",
    "coupons_by_type",
    "store_status",
    "top_stores",
)


@pytest.fixture
def seeded(user_factory, store_factory, coupon_factory):
    """A small platform: two users, two stores and three coupons."""
    user_factory()
    user_factory(is_active=False)
    shop = store_factory(name="Shop", total_coupon_used_times=12)
    store_factory(name="Mall", total_coupon_used_times=40, is_active=False)
    coupon_factory(id_store=shop.id_store, coupon_type=CouponType.DEAL)
    coupon_factory(id_store=shop.id_store, status=CouponStatus.EXPIRED)
    coupon_factory(id_store=shop.id_store)


@pytest.fixture
def unavailable_storage(broken_engine):
    app.dependency_overrides[get_dashboard_service] = lambda: DashboardService(
        SQLMetricRepository(broken_engine), timeout=5.0
    )


class TestReportEndpoints:
    def test_get_summary(self, client: TestClient, seeded):
        response = client.get("/admin/dashboard/summary")

        assert response.status_code == 200
        data = response.json()
        assert data["total_users"] == 2
        assert data["active_users"] == 1
        assert data["total_coupons"] == 3
        assert data["expired_coupons"] == 1

    def test_get_trends_default_window(self, client: TestClient, seeded):
        response = client.get("/admin/dashboard/trends")

        assert response.status_code == 200
        data = response.json()
        now = utc_now()
        for series in ("users", "stores", "coupons"):
            assert len(data[series]) == 6
            assert data[series][-1]["year"] == now.year
            assert data[series][-1]["month"] == now.month
        assert data["coupons"][-1]["count"] == 3

    def test_get_trends_custom_window(self, client: TestClient, user_factory):
        user_factory(created_at=datetime(2001, 1, 1, tzinfo=timezone.utc))

        response = client.get("/admin/dashboard/trends", params={"months": 2})

        assert response.status_code == 200
        assert [p["count"] for p in response.json()["users"]] == [0, 0]

    def test_get_trends_empty_database(self, client: TestClient):
        response = client.get("/admin/dashboard/trends", params={"months": 3})

        assert response.status_code == 200
        for series in ("users", "stores", "coupons"):
            assert [p["count"] for p in response.json()[series]] == [0, 0, 0]

    def test_get_trends_rejects_zero_months(self, client: TestClient):
        response = client.get("/admin/dashboard/trends", params={"months": 0})

        assert response.status_code == 422

    def test_get_coupons_by_status(self, client: TestClient, seeded):
        response = client.get("/admin/dashboard/coupons/status")

        assert response.status_code == 200
        assert response.json() == [
            {"label": "active", "count": 2},
            {"label": "expired", "count": 1},
        ]

    def test_get_coupons_by_type(self, client: TestClient, seeded):
        response = client.get("/admin/dashboard/coupons/type")

        assert response.status_code == 200
        assert {g["label"]: g["count"] for g in response.json()} == {
            "coupon": 2,
            "deal": 1,
        }

    def test_get_store_status(self, client: TestClient, seeded):
        response = client.get("/admin/dashboard/stores/status")

        assert response.status_code == 200
        assert {g["label"]: g["count"] for g in response.json()} == {
            "Active": 1,
            "Inactive": 1,
        }

    def test_get_top_stores(self, client: TestClient, seeded):
        response = client.get("/admin/dashboard/stores/top", params={"limit": 1})

        assert response.status_code == 200
        assert response.json() == [{"name": "Mall", "uses": 40}]

    def test_empty_database(self, client: TestClient):
        assert client.get("/admin/dashboard/stores/top").json() == []
        assert client.get("/admin/dashboard/coupons/status").json() == []


class TestDashboardSnapshot:
    def test_get_dashboard(self, client: TestClient, seeded):
        response = client.get("/admin/dashboard/", params={"months": 3, "limit": 5})

        assert response.status_code == 200
        data = response.json()
        for report in SNAPSHOT_REPORTS:
            assert data[report]["success"] is True
            assert data[report]["error"] is None
        assert len(data["monthly_trends"]["data"]["users"]) == 3
        assert [s["name"] for s in data["top_stores"]["data"]] == ["Mall", "Shop"]

    def test_dashboard_degrades_per_report(self, client: TestClient, unavailable_storage):
        response = client.get("/admin/dashboard/")

        assert response.status_code == 200
        data = response.json()
        for report in SNAPSHOT_REPORTS:
            assert data[report]["success"] is False
            assert data[report]["data"] is None
            assert data[report]["error"]


class TestStorageErrors:
    def test_summary_storage_unavailable(self, client: TestClient, unavailable_storage):
        response = client.get("/admin/dashboard/summary")

        assert response.status_code == 503
        assert response.json() == {"detail": "Statistics are temporarily unavailable"}

    def test_top_stores_storage_unavailable(
        self, client: TestClient, unavailable_storage
    ):
        assert client.get("/admin/dashboard/stores/top").status_code == 503
