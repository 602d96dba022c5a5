from contextlib import contextmanager
from datetime import datetime, UTC

from sqlalchemy import create_engine, event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base, Session
from taskline.config import DATABASE_URL
from taskline.errors import InternalError
from taskline.logging_config import get_logger

logger = get_logger(__name__)

_is_sqlite = DATABASE_URL.startswith("sqlite")

# Only apply sqlite-specific connect_args when using sqlite
connect_args = {"check_same_thread": False} if _is_sqlite else {}

# Enable pool_pre_ping to avoid stale connections (useful for cloud DBs like Neon)
engine = create_engine(
    DATABASE_URL,
    connect_args=connect_args,
    pool_pre_ping=True,
)

if _is_sqlite:
    @event.listens_for(engine, "connect")
    def _configure_sqlite_connection(dbapi_connection, connection_record):
        # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        # Stop pysqlite from issuing its own deferred BEGIN; see _begin_immediate
        dbapi_connection.isolation_level = None

    # SQLite drops FOR UPDATE, so the write lock is taken when the transaction
    # starts. Reads inside a unit of work then see no concurrent writer.
    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def utcnow() -> datetime:
    """Current time as a naive UTC datetime, the form every timestamp is stored in."""
    return datetime.now(UTC).replace(tzinfo=None)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session):
    """Commit everything done inside the block, or roll all of it back.

    Multi-row mutations (order shifts, completing a whole task) must not be
    left half-applied, so any exception undoes the block before propagating.
    Store failures surface as InternalError.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise InternalError(f"Database error: {exc}") from exc
    except Exception:
        logger.debug("Rolling back unit of work")
        db.rollback()
        raise
