import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from app.core.config import settings
from app.core.errors import DomainError, StorageError

logger = logging.getLogger(__name__)


def build_engine(url: str) -> Engine:
    """
    Create an engine for the given URL.

    PostgreSQL is the production store; seat and schedule checks rely on
    ``SELECT ... FOR UPDATE`` row locks taken inside each transaction.
    SQLite ignores FOR UPDATE, so every SQLite transaction is opened with
    ``BEGIN IMMEDIATE`` instead, which makes write transactions run one at a
    time against the file.
    """
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    engine = create_engine(
        url,
        connect_args={
            "check_same_thread": False,
            "timeout": settings.SQLITE_BUSY_TIMEOUT_SECONDS,
        },
    )

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        # Let SQLAlchemy emit BEGIN itself
        dbapi_connection.isolation_level = None
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """
    Run a block as one all-or-nothing transaction.

    Commits when the block exits normally. Any exception rolls the whole
    transaction back; SQLAlchemy failures are re-raised as StorageError so
    callers can retry, domain errors propagate unchanged.
    """
    try:
        yield db
        db.commit()
    except DomainError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Transaction aborted by the database")
        raise StorageError() from exc
    except Exception:
        db.rollback()
        raise
