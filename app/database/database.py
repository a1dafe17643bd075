from app.core.config import get_settings
from sqlalchemy.engine import make_url
from sqlmodel import Session, SQLModel, create_engine

# Registers every table on SQLModel.metadata
from app.models import category, coupon, role, store, user  # noqa: F401


def build_engine(database_url: str):
    """
    Create the SQLAlchemy engine for a database URL.

    SQLite connections are opened with `check_same_thread=False` because dashboard
    reports and the reset job query from worker threads. Postgres sessions run in UTC so
    month buckets over `timestamptz` columns match the stored UTC instants.
    """
    connect_args = {}
    backend = make_url(database_url).get_backend_name()
    if backend == "sqlite":
        connect_args["check_same_thread"] = False
    elif backend == "postgresql":
        connect_args["options"] = "-c timezone=utc"
    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


engine = build_engine(get_settings().DATABASE_URL)


def create_db_and_tables():
    """
    Create database tables defined in SQLModel metadata.

    Creates all tables in the configured database according to `SQLModel.metadata` using the module-level engine.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    Provide a context-managed SQLModel session.

    Returns:
        session (Session): A SQLModel Session bound to the module-level engine. The session is yielded for use and is closed when the generator exits.
    """
    with Session(engine) as session:
        yield session


def get_engine():
    return engine
