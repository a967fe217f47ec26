"""
Database Session Management

Engine construction, the request/script session factory and connection
lifecycle helpers. PostgreSQL gets a sized connection pool; SQLite URLs
(local development, tests) get a single-thread-safe engine with foreign keys
enforced so cascades behave as they do on PostgreSQL.
"""
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event, exc, pool, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from config.settings import settings
from src.estatesite.utils.logger import get_logger

logger = get_logger(__name__)


def is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _log_connect(dbapi_conn, connection_record):
    logger.debug("database_connection_established")


def _log_checkout(dbapi_conn, connection_record, connection_proxy):
    logger.debug("database_connection_checkout")


def build_engine(url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given database URL.

    Args:
        url: SQLAlchemy database URL
        echo: Log every SQL statement

    Returns:
        Configured engine with connection event logging attached
    """
    if is_sqlite(url):
        options = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live in one connection
        if make_url(url).database in (None, "", ":memory:"):
            options["poolclass"] = pool.StaticPool
        new_engine = create_engine(url, echo=echo, **options)
        event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)
    else:
        new_engine = create_engine(
            url,
            echo=echo,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_timeout=settings.database_pool_timeout,
            pool_recycle=settings.database_pool_recycle,
            pool_pre_ping=True,
        )

    event.listen(new_engine, "connect", _log_connect)
    event.listen(new_engine, "checkout", _log_checkout)
    logger.debug("database_engine_created", backend=new_engine.dialect.name)
    return new_engine


@event.listens_for(pool.Pool, "invalidate")
def receive_invalidate(dbapi_conn, connection_record, exception):
    """Log connections dropped from the pool after an error."""
    logger.warning(
        "database_connection_invalidated",
        exception=str(exception) if exception else None
    )


engine = build_engine(settings.database_url, echo=settings.database_echo)

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False
)


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Session for scripts: commits on success, rolls back and re-raises on error.

    Usage:
        with get_db_session() as session:
            session.add(Property(...))
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(
            "database_session_rollback",
            error=str(e),
            error_type=type(e).__name__
        )
        raise
    finally:
        session.close()


def health_check(session: Session) -> bool:
    """
    Probe the database through an open session.

    Returns:
        True if a trivial query succeeds
    """
    try:
        session.execute(text("SELECT 1"))
        return True
    except exc.SQLAlchemyError as e:
        logger.error(
            "database_health_check_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        return False


def close_connections():
    """Dispose of the engine's pool on application shutdown."""
    engine.dispose()
    logger.info("database_connections_closed")


def create_all_tables(bind: Optional[Engine] = None, drop: bool = False) -> None:
    """
    Create every table from the ORM models.

    Alembic owns production schemas; this is for local setup and demos.

    Args:
        bind: Engine to use (defaults to the configured engine)
        drop: Drop the site tables first
    """
    from src.estatesite.db.base import Base, import_all_models

    target = bind or engine
    import_all_models()

    if drop:
        logger.warning("dropping_database_tables", tables=sorted(Base.metadata.tables))
        Base.metadata.drop_all(bind=target)

    Base.metadata.create_all(bind=target, checkfirst=True)
    logger.info("database_tables_created", count=len(Base.metadata.tables))
