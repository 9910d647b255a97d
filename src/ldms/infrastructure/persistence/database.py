"""Engine construction and store-error translation.

Every store call carries a timeout: SQLite waits at most ``timeout``
seconds on a locked database, other backends at most ``timeout`` seconds
for a pooled connection.  Timeouts and dropped connections surface as
StoreUnavailableError so callers can retry instead of hanging.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, TypeVar

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from ldms.domain.exceptions import StoreUnavailableError
from ldms.infrastructure.persistence.tables import Base

F = TypeVar("F", bound=Callable[..., Any])


def create_store_engine(database_url: str, timeout: float) -> Engine:
    """Build an engine for *database_url* and make sure the schema exists."""
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        _ensure_sqlite_dir(url)
        engine = create_engine(
            url,
            connect_args={"timeout": timeout, "check_same_thread": False},
            pool_timeout=timeout,
        )
        _install_sqlite_hooks(engine)
    else:
        engine = create_engine(url, pool_timeout=timeout, pool_pre_ping=True)

    try:
        Base.metadata.create_all(engine)
    except (OperationalError, PoolTimeoutError) as exc:
        raise StoreUnavailableError(
            f"Store unavailable while preparing schema at {url!r}: "
            f"{getattr(exc, 'orig', None) or exc}"
        ) from exc
    return engine


def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False)


def translate_store_errors(method: F) -> F:
    """Turn transient SQLAlchemy failures into StoreUnavailableError.

    The message names the call and its arguments (deal id, quantity) so a
    failure can be traced back to the request that hit it.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (OperationalError, PoolTimeoutError) as exc:
            raise StoreUnavailableError(_describe(method, args, exc)) from exc
        except DBAPIError as exc:
            if exc.connection_invalidated:
                raise StoreUnavailableError(_describe(method, args, exc)) from exc
            raise

    return wrapper  # type: ignore[return-value]


def to_store_time(value: datetime) -> datetime:
    """Normalise an aware datetime to the naive UTC form the tables hold."""
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_store_time(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# --- Internal helpers ---------------------------------------------------------


def _describe(method: Callable[..., Any], args: tuple, exc: Exception) -> str:
    call_args = ", ".join(repr(a) for a in args)
    cause = getattr(exc, "orig", None) or exc
    return f"Store unavailable during {method.__name__}({call_args}): {cause}"


def _ensure_sqlite_dir(url: URL) -> None:
    if url.database and url.database != ":memory:":
        directory = Path(url.database).parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreUnavailableError(
                f"Cannot create database directory {directory}: {exc}"
            ) from exc


def _install_sqlite_hooks(engine: Engine) -> None:
    """Take SQLite's write lock at BEGIN and enforce foreign keys.

    pysqlite's own transaction handling begins lazily, which lets two
    writers dead-lock on lock promotion and fail without waiting.
    Beginning IMMEDIATE makes them queue on the busy timeout instead.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")
