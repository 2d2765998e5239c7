"""Database connection management for the SQL storage backend."""

from collections.abc import Generator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create a database engine.

    SQLite connections are shared across threads; in-memory SQLite uses a
    single static connection so every session sees the same database.

    Args:
        database_url: SQLAlchemy database URL.
        echo: Log emitted SQL.

    Returns:
        Engine instance.
    """
    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs = {
            "pool_size": 10,
            "max_overflow": 20,
            "pool_timeout": 30,
            "pool_recycle": 3600,
            "pool_pre_ping": True,
        }

    engine = create_engine(database_url, echo=echo, **kwargs)
    logger.info(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")
    return engine


def create_session_maker(engine: Engine) -> sessionmaker[Session]:
    """Create a session factory bound to an engine."""
    return sessionmaker(
        engine,
        class_=Session,
        expire_on_commit=False,
        autoflush=False,
    )


@contextmanager
def session_scope(session_maker: sessionmaker[Session]) -> Generator[Session, None, None]:
    """
    Get a database session.

    Provides a context manager that handles commit/rollback
    automatically.

    Yields:
        Session instance.

    Example:
        >>> with session_scope(session_maker) as session:
        ...     session.merge(record)
    """
    with session_maker() as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise


def init_db(engine: Engine) -> None:
    """
    Initialize the database schema.

    Creates all tables defined in the models if they don't exist.
    """
    from taskgraph.storage.models import Base

    logger.info("Initializing database schema")
    Base.metadata.create_all(engine)
    logger.info("Database schema initialized")

