from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from .config import settings


def _is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def _is_sqlite_memory(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite:///:memory:")


def _ensure_sqlite_dir(database_url: str) -> None:
    """
    Ensure the parent folder exists for SQLite file-based DB URLs like:
      sqlite:///./data/votehub.sqlite
      sqlite:////absolute/path/to/db.sqlite
    """
    if not database_url.startswith("sqlite:///") or _is_sqlite_memory(database_url):
        return

    path = database_url.replace("sqlite:///", "", 1)
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)


def _sqlite_pragmas(engine: Engine, *, file_backed: bool) -> None:
    """
    Pragmas for a single-writer ledger file.
    """

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        if file_backed:
            cursor.execute("PRAGMA journal_mode=WAL;")
            cursor.execute("PRAGMA synchronous=FULL;")
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.execute("PRAGMA busy_timeout=5000;")
        cursor.close()


def make_engine(database_url: str) -> Engine:
    """
    Create an engine for the given URL.

    - SQLite gets pragmas + check_same_thread=False (ledger calls come from API worker threads)
    - In-memory SQLite shares one connection (StaticPool) so every session sees the same data
    - Any other SQLAlchemy URL is passed through untouched
    """
    if not _is_sqlite(database_url):
        return create_engine(database_url, echo=False, pool_pre_ping=True)

    if _is_sqlite_memory(database_url):
        engine = create_engine(
            database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        _sqlite_pragmas(engine, file_backed=False)
        return engine

    _ensure_sqlite_dir(database_url)
    engine = create_engine(
        database_url,
        echo=False,
        connect_args={"check_same_thread": False},
        pool_pre_ping=True,
    )
    _sqlite_pragmas(engine, file_backed=True)
    return engine


def get_engine() -> Engine:
    return make_engine(settings.resolved_database_url)


# Single, shared engine for the app process
engine: Engine = get_engine()


def register_models() -> None:
    """
    Central place to import ALL models so SQLModel registers them.
    """
    from .models.election_state import ElectionState  # noqa: F401
    from .models.candidate import Candidate  # noqa: F401
    from .models.principal import Principal  # noqa: F401
    from .models.participation_token import ParticipationToken, TokenCollection  # noqa: F401
    from .models.vote_record import VoteRecord  # noqa: F401
    from .models.payout import Payout  # noqa: F401
    from .models.ledger_event import LedgerEvent  # noqa: F401


def init_db(bind: Optional[Engine] = None, create_tables: bool = True) -> None:
    """
    Register models, then create missing tables.
    Non-destructive: create_all will not drop or alter existing tables.
    """
    register_models()
    if create_tables:
        SQLModel.metadata.create_all(bind or engine)


@contextmanager
def session_scope(bind: Optional[Engine] = None) -> Generator[Session, None, None]:
    """
    Context manager with commit/rollback safety.

    Usage:
        with session_scope(engine) as db:
            db.add(...)
    """
    session = Session(bind or engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
