"""
Connection pool and declarative base.

The pool is an explicitly constructed object: main.create_app() builds one
from Settings and hands it to the request dependencies through app.state.
Nothing in this module keeps a process-wide engine.
"""
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import DBAPIError, TimeoutError as SQLAlchemyTimeoutError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool

from constants import PoolDefaults
from exceptions import DatabaseConnectionError, PoolExhaustedError

logger = logging.getLogger(__name__)

Base = declarative_base()


@dataclass(frozen=True)
class PoolStats:
    """Snapshot of pool usage, exposed on the healthcheck and used by tests."""

    size: int
    max_overflow: int
    checked_out: int
    peak_checked_out: int
    total_checkouts: int
    double_lends: int


class ConnectionPool:
    """
    Bounded set of database connections lent out one request at a time.

    Wraps a SQLAlchemy engine configured with a QueuePool. A borrower calls
    acquire() and receives a Session bound to exactly one checked-out
    connection; the connection goes back to the pool when the with-block
    exits, whether it exits normally or through an exception.
    """

    def __init__(
        self,
        url: str,
        pool_size: int = PoolDefaults.SIZE,
        max_overflow: int = PoolDefaults.MAX_OVERFLOW,
        timeout: float = PoolDefaults.TIMEOUT_SECONDS,
        recycle: int = PoolDefaults.RECYCLE_SECONDS,
        echo: bool = False,
    ):
        """
        Initialize the pool.

        Args:
            url: SQLAlchemy database URL
            pool_size: Connections kept open
            max_overflow: Extra connections allowed above pool_size
            timeout: Seconds acquire() waits for a free connection
            recycle: Recycle connections older than this many seconds
            echo: Log every SQL statement
        """
        self.url = url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.timeout = timeout

        is_sqlite = make_url(url).get_backend_name() == "sqlite"
        connect_args = {}
        if is_sqlite:
            connect_args["check_same_thread"] = False

        self.engine: Engine = create_engine(
            url,
            connect_args=connect_args,
            echo=echo,
            poolclass=QueuePool,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=timeout,
            pool_pre_ping=True,  # Verify connections are alive before using
            pool_recycle=recycle,
        )
        self._session_factory = sessionmaker(expire_on_commit=False)

        self._lock = threading.Lock()
        self._lent: set[int] = set()
        self._peak = 0
        self._total_checkouts = 0
        self._double_lends = 0

        if is_sqlite:
            event.listen(self.engine, "connect", _set_sqlite_pragma)
        event.listen(self.engine, "checkout", self._on_checkout)
        event.listen(self.engine, "checkin", self._on_checkin)

        logger.info(
            f"Connection pool created for {self.engine.url.render_as_string(hide_password=True)} "
            f"(size={pool_size}, max_overflow={max_overflow}, timeout={timeout:g}s)"
        )

    @classmethod
    def from_settings(cls, settings) -> "ConnectionPool":
        """Build a pool from a config.Settings instance."""
        return cls(
            settings.database_url,
            pool_size=settings.pool_size,
            max_overflow=settings.pool_max_overflow,
            timeout=settings.pool_timeout,
            recycle=settings.pool_recycle,
            echo=settings.echo_sql,
        )

    @contextmanager
    def acquire(self) -> Iterator[Session]:
        """
        Borrow one connection for the duration of a with-block.

        Yields:
            Session bound to the borrowed connection

        Raises:
            PoolExhaustedError: If no connection frees up within the pool timeout
            DatabaseConnectionError: If a new connection cannot be opened
        """
        try:
            connection = self.engine.connect()
        except SQLAlchemyTimeoutError as e:
            logger.warning(
                f"Pool exhausted: {self.stats().checked_out} connection(s) lent, "
                f"waited {self.timeout:g}s"
            )
            raise PoolExhaustedError(self.timeout) from e
        except DBAPIError as e:
            logger.error(f"Could not open database connection: {e}")
            raise DatabaseConnectionError(f"Could not connect to database: {e.orig}") from e

        session = self._session_factory(bind=connection)
        try:
            yield session
        finally:
            # Session.close() rolls back anything left uncommitted
            session.close()
            connection.close()

    def stats(self) -> PoolStats:
        with self._lock:
            return PoolStats(
                size=self.pool_size,
                max_overflow=self.max_overflow,
                checked_out=len(self._lent),
                peak_checked_out=self._peak,
                total_checkouts=self._total_checkouts,
                double_lends=self._double_lends,
            )

    def dispose(self) -> None:
        """Close every pooled connection."""
        self.engine.dispose()
        logger.info("Connection pool disposed")

    def _on_checkout(self, dbapi_conn, connection_record, connection_proxy):
        key = id(connection_record)
        with self._lock:
            if key in self._lent:
                self._double_lends += 1
                logger.error(f"Connection {key:#x} lent while already checked out")
            self._lent.add(key)
            self._total_checkouts += 1
            self._peak = max(self._peak, len(self._lent))

    def _on_checkin(self, dbapi_conn, connection_record):
        with self._lock:
            self._lent.discard(id(connection_record))


def _set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute(f"PRAGMA busy_timeout={PoolDefaults.SQLITE_BUSY_TIMEOUT_MS}")  # Wait for locks instead of failing immediately
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

