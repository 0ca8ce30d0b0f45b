# barbershop/db.py

import logging
from contextlib import contextmanager

from sqlalchemy import event
from sqlmodel import SQLModel, create_engine, Session

from .config import DATABASE_URL, SQL_ECHO

logger = logging.getLogger(__name__)


def _use_immediate_transactions(engine):
    # pysqlite defers BEGIN and ignores SELECT ... FOR UPDATE, so take the
    # write lock when the transaction starts instead.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(url: str = DATABASE_URL, **kwargs):
    is_sqlite = url.startswith("sqlite")
    connect_args = {"check_same_thread": False} if is_sqlite else {}  # required for SQLite + FastAPI
    engine = create_engine(url, echo=SQL_ECHO, connect_args=connect_args, **kwargs)
    if is_sqlite:
        _use_immediate_transactions(engine)
    return engine


engine = create_db_engine()


def init_db(bind=None):
    from . import models  # noqa: F401 - registers tables on SQLModel.metadata

    SQLModel.metadata.create_all(bind or engine)
    logger.info("Database tables created")


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session


@contextmanager
def transaction(session: Session):
    """Unit of work: commit when the block finishes, roll back on any error."""
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
