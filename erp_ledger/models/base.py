"""
Database engine, session management, and base model.

Every model inherits from Base. Every request gets a session
from get_db(). The sequencer opens its own short sessions from
SessionLocal, so it must stay a sessionmaker and not a scoped
session.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from erp_ledger.config import get_settings

settings = get_settings()


def _connect_args(url: str) -> dict:
    # SQLite connections are shared across the worker threads of
    # the API server and the sequencer.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


# --- Engine ---
# pool_pre_ping=True tests connections before using them, which
# handles cases where the database restarted or a connection
# went stale.
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.DATABASE_URL),
)

# --- Session Factory ---
# autocommit=False: the caller decides when a posting is committed.
# autoflush=False: SQL is only sent on explicit flush or commit.
# expire_on_commit=False: posted transactions stay readable after
# the caller commits.
SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


# --- Dependency for FastAPI ---
def get_db():
    """
    Provide a database session for a single request.

    The try/finally pattern ensures the session is always
    closed, preventing connection leaks.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
