import itertools
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine

from app.database.database import get_engine, get_session
from app.jobs.scheduler import CouponUsageResetScheduler
from app.main import app
from app.models.category import Category
from app.models.coupon import Coupon
from app.models.enums import CouponStatus, CouponType
from app.models.role import Role
from app.models.store import Store
from app.models.user import User
from app.repositories.metrics import SQLMetricRepository
from app.services.dashboard import DashboardService


@pytest.fixture(name="engine")
def engine_fixture(tmp_path):
    """
    Create a file-backed SQLite engine with every table.

    A file database (rather than `:memory:`) gives each worker thread its own connection,
    which the concurrent dashboard reports rely on.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'dealboard.db'}",
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="broken_engine")
def broken_engine_fixture(tmp_path):
    """Engine pointing at a database file that cannot be opened."""
    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'nowhere.db'}")
    yield engine
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="repository")
def repository_fixture(engine) -> SQLMetricRepository:
    return SQLMetricRepository(engine)


@pytest.fixture(name="dashboard_service")
def dashboard_service_fixture(repository) -> DashboardService:
    return DashboardService(repository, timeout=5.0)


def _persist(session: Session, instance):
    session.add(instance)
    session.commit()
    session.refresh(instance)
    return instance


@pytest.fixture(name="role_factory")
def role_factory_fixture(session: Session):
    sequence = itertools.count(1)

    def create(**overrides) -> Role:
        n = next(sequence)
        data = {"name": f"role_{n}", "display_name": f"Role {n}"}
        data.update(overrides)
        return _persist(session, Role(**data))

    return create


@pytest.fixture(name="category_factory")
def category_factory_fixture(session: Session):
    sequence = itertools.count(1)

    def create(**overrides) -> Category:
        n = next(sequence)
        data = {"name": f"Category {n}", "slug": f"category-{n}"}
        data.update(overrides)
        return _persist(session, Category(**data))

    return create


@pytest.fixture(name="user_factory")
def user_factory_fixture(session: Session):
    """
    Create a factory persisting users with unique emails.

    Returns:
        Callable[..., User]: Accepts any User field as keyword override (for example `is_active` or `created_at`).
    """
    sequence = itertools.count(1)

    def create(**overrides) -> User:
        n = next(sequence)
        data = {"name": f"User {n}", "email": f"user{n}@example.com"}
        data.update(overrides)
        return _persist(session, User(**data))

    return create


@pytest.fixture(name="store_factory")
def store_factory_fixture(session: Session):
    sequence = itertools.count(1)

    def create(**overrides) -> Store:
        n = next(sequence)
        data = {"name": f"Store {n}", "slug": f"store-{n}"}
        data.update(overrides)
        return _persist(session, Store(**data))

    return create


@pytest.fixture(name="coupon_factory")
def coupon_factory_fixture(session: Session, store_factory):
    """
    Create a factory persisting coupons.

    A store is created for the coupon unless `id_store` is passed. Defaults to an active coupon
    of type "coupon" with no uses.
    """
    sequence = itertools.count(1)

    def create(**overrides) -> Coupon:
        n = next(sequence)
        data = {
            "title": f"Coupon {n}",
            "coupon_code": f"CODE{n:04d}",
            "coupon_type": CouponType.COUPON,
            "status": CouponStatus.ACTIVE,
        }
        data.update(overrides)
        if "id_store" not in data:
            data["id_store"] = store_factory().id_store
        return _persist(session, Coupon(**data))

    return create


@pytest.fixture(name="reset_scheduler")
def reset_scheduler_fixture():
    """A scheduler whose job does nothing; stopped again on teardown."""
    scheduler = CouponUsageResetScheduler(lambda: 0)
    yield scheduler
    scheduler.stop()


@pytest.fixture(name="client")
def client_fixture(engine, session: Session, reset_scheduler):
    """
    Create a test client bound to the test database.

    The lifespan is not run: the session, engine and scheduler are injected directly.
    """

    def _get_test_session():
        yield session

    app.dependency_overrides[get_session] = _get_test_session
    app.dependency_overrides[get_engine] = lambda: engine
    app.state.reset_scheduler = reset_scheduler

    yield TestClient(app)

    app.dependency_overrides.clear()
