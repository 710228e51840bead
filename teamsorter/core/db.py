from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from teamsorter.core.settings import config_settings


def build_engine(database_url: str) -> Engine:
    """
    Creates the SQLAlchemy engine, the starting point for all database access.
    It manages the connection pool and dialect.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Only needed for SQLite to handle concurrent requests
        connect_args = {"check_same_thread": False}

    return create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


engine = build_engine(config_settings.DATABASE_URL)

# Each request gets its own session (a unit of work) from this factory.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
    """Ensures the schema exists. Safe to call on every startup."""
    # Import models so metadata is registered
    from teamsorter.models.orm import assignment  # noqa: F401
    from teamsorter.models.orm.base import Base

    Base.metadata.create_all(bind=bind)


def close_db(bind: Engine = engine) -> None:
    bind.dispose()


def get_db():
    """
    Dependency that yields a database session for a single request,
    and ensures the session is closed afterward.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
