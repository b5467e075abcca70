import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from src.api.errors import StorageError, from_sqlalchemy
from src.api.models import Base

logger = logging.getLogger(__name__)


def _configure_sqlite_connection(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class _SharedEngine:
    """Engine plus the count of Database handles referring to it."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.session_factory = sessionmaker(
            bind=engine, autocommit=False, autoflush=False, expire_on_commit=False
        )
        self.refs = 1
        self.lock = threading.Lock()


class Database:
    """
    Handle on the single local SQLite database.

    The handle owns one SQLAlchemy engine and its connection pool. clone()
    hands out further handles on the same engine; the engine is disposed
    once every handle has been closed.
    """

    def __init__(self, shared: _SharedEngine):
        self._shared = shared
        self._closed = False

    # PUBLIC_INTERFACE
    @classmethod
    def open(cls, path: Union[str, Path], busy_timeout: float = 30.0) -> "Database":
        """
        Open (creating if absent) the database file at path and ensure the schema.

        Raises:
            StorageError if the file cannot be opened or the schema created.
        """
        db_path = Path(path)
        try:
            db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"cannot create directory for {db_path}: {exc}") from exc

        # SQLite needs check_same_thread=False since the pool is shared across worker threads
        engine = create_engine(
            f"sqlite:///{db_path}",
            connect_args={"check_same_thread": False, "timeout": busy_timeout},
            future=True,
        )
        event.listen(engine, "connect", _configure_sqlite_connection)
        try:
            # create_all checks for existing tables, so reopening is safe
            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as exc:
            engine.dispose()
            raise from_sqlalchemy(exc) from exc

        logger.info("Database opened", extra={"db_path": str(db_path)})
        return cls(_SharedEngine(engine))

    # PUBLIC_INTERFACE
    def pool(self) -> Engine:
        """Return the engine that owns the connection pool."""
        if self._closed:
            raise StorageError("database handle is closed")
        return self._shared.engine

    # PUBLIC_INTERFACE
    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Provide a session that commits on success and rolls back on error.

        SQLAlchemy failures are re-raised as StorageError (or
        UniqueConstraintError for unique index violations).
        """
        if self._closed:
            raise StorageError("database handle is closed")
        db = self._shared.session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise from_sqlalchemy(exc) from exc
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # PUBLIC_INTERFACE
    def clone(self) -> "Database":
        """Return another handle sharing this handle's engine."""
        with self._shared.lock:
            if self._closed or self._shared.refs == 0:
                raise StorageError("database handle is closed")
            self._shared.refs += 1
        return Database(self._shared)

    # PUBLIC_INTERFACE
    def close(self) -> None:
        """Release this handle; the last release disposes the engine."""
        if self._closed:
            return
        self._closed = True
        with self._shared.lock:
            self._shared.refs -= 1
            last = self._shared.refs == 0
        if last:
            self._shared.engine.dispose()
            logger.info("Database closed")

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
