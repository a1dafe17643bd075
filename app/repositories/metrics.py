"""Read-only metric queries over the platform's entity tables.

The dashboard never loads raw records: every operation here is a single
aggregate query (count, group by, month buckets or an ordered slice) answered
by the database. Each call opens its own session so independent reports can
run concurrently in worker threads.
"""

from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import Any, Iterator, Protocol

from loguru import logger
from sqlalchemy import Column, Engine, extract
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, func, select

from app.exceptions import InvalidFilterError, StorageUnavailableError
from app.models.category import Category
from app.models.coupon import Coupon
from app.models.role import Role
from app.models.store import Store
from app.models.user import User
from app.utils.dates import as_utc


class MetricEntity(str, Enum):
    USER = "user"
    STORE = "store"
    COUPON = "coupon"
    CATEGORY = "category"
    ROLE = "role"


ENTITY_MODELS: dict[MetricEntity, type[SQLModel]] = {
    MetricEntity.USER: User,
    MetricEntity.STORE: Store,
    MetricEntity.COUPON: Coupon,
    MetricEntity.CATEGORY: Category,
    MetricEntity.ROLE: Role,
}


class MetricRepository(Protocol):
    """Contract for the aggregate reads the dashboard is built from."""

    def count(
        self, entity: MetricEntity, filters: dict[str, Any] | None = None
    ) -> int: ...

    def group_by_field(
        self, entity: MetricEntity, field: str
    ) -> list[tuple[Any, int]]: ...

    def bucket_by_month(
        self, entity: MetricEntity, since: datetime
    ) -> list[tuple[int, int, int]]: ...

    def top_n_by_field(
        self,
        entity: MetricEntity,
        field: str,
        limit: int,
        descending: bool = True,
        label_field: str = "name",
    ) -> list[tuple[str, int]]: ...


class SQLMetricRepository:
    """MetricRepository backed by a SQLAlchemy engine."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        """
        Open a short-lived session and translate driver failures.

        Raises:
            StorageUnavailableError: If the database raises any SQLAlchemy error while the session is in use.
        """
        try:
            with Session(self.engine) as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Metric query '{operation}' failed: {e}")
            raise StorageUnavailableError(operation, type(e).__name__) from e

    @staticmethod
    def _column(entity: MetricEntity, field: str) -> Column:
        table = ENTITY_MODELS[entity].__table__  # type: ignore[attr-defined]
        column = table.columns.get(field)
        if column is None:
            raise InvalidFilterError(entity.value, field)
        return column

    def count(
        self, entity: MetricEntity, filters: dict[str, Any] | None = None
    ) -> int:
        """
        Count records of an entity, optionally restricted by equality filters.

        Parameters:
            entity: Entity to count.
            filters: Mapping of field name to required value; empty or None counts every record.

        Returns:
            int: Number of matching records. A filter naming an unknown field matches nothing and yields 0.
        """
        try:
            conditions = [
                self._column(entity, name) == value
                for name, value in (filters or {}).items()
            ]
        except InvalidFilterError as e:
            logger.warning(f"Ignoring count on invalid filter: {e}")
            return 0

        statement = select(func.count()).select_from(ENTITY_MODELS[entity])
        if conditions:
            statement = statement.where(*conditions)
        with self._session("count") as session:
            return session.exec(statement).one()

    def group_by_field(self, entity: MetricEntity, field: str) -> list[tuple[Any, int]]:
        """
        Count records per distinct value of a field in one grouped query.

        Returns:
            list[tuple[Any, int]]: `(value, count)` pairs in no particular order; empty for an unknown field.
        """
        try:
            column = self._column(entity, field)
        except InvalidFilterError as e:
            logger.warning(f"Ignoring grouping on invalid field: {e}")
            return []

        statement = (
            select(column, func.count())
            .select_from(ENTITY_MODELS[entity])
            .group_by(column)
        )
        with self._session("group_by_field") as session:
            return [(value, count) for value, count in session.exec(statement).all()]

    def bucket_by_month(
        self, entity: MetricEntity, since: datetime
    ) -> list[tuple[int, int, int]]:
        """
        Count records created since a given instant, per calendar month (UTC).

        Months without records are absent from the result; filling them is the caller's job.
        A naive `since` is read as UTC.

        Returns:
            list[tuple[int, int, int]]: `(year, month, count)` triples ordered by year then month.
        """
        created_at = self._column(entity, "created_at")
        year = extract("year", created_at).label("year")
        month = extract("month", created_at).label("month")
        statement = (
            select(year, month, func.count())
            .select_from(ENTITY_MODELS[entity])
            .where(created_at >= as_utc(since))
            .group_by(year, month)
            .order_by(year, month)
        )
        with self._session("bucket_by_month") as session:
            # Postgres returns EXTRACT as numeric
            return [(int(y), int(m), count) for y, m, count in session.exec(statement).all()]

    def top_n_by_field(
        self,
        entity: MetricEntity,
        field: str,
        limit: int,
        descending: bool = True,
        label_field: str = "name",
    ) -> list[tuple[str, int]]:
        """
        Return the first `limit` records ordered by a numeric field.

        Ties keep whatever order the database produces.

        Returns:
            list[tuple[str, int]]: `(label, value)` pairs, at most `limit` long; empty if either field is unknown.
        """
        try:
            column = self._column(entity, field)
            label = self._column(entity, label_field)
        except InvalidFilterError as e:
            logger.warning(f"Ignoring ranking on invalid field: {e}")
            return []

        order = column.desc() if descending else column.asc()
        statement = (
            select(label, column)
            .select_from(ENTITY_MODELS[entity])
            .order_by(order)
            .limit(limit)
        )
        with self._session("top_n_by_field") as session:
            return [(name, value) for name, value in session.exec(statement).all()]
