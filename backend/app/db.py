import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator, Optional
from backend.app.config import settings
from backend.app.schema import SCHEMA_SQL

logger = logging.getLogger(__name__)


def _sqlite_path_from_url(database_url: str) -> str:
    # this should support:
    #   sqlite:///./data/app.db  -> ./data/app.db
    #   sqlite:///data/app.db    -> data/app.db
    #   sqlite:////abs/path.db   -> /abs/path.db
    if not database_url.startswith("sqlite:"):
        raise ValueError("Only sqlite DATABASE_URL is supported")

    if database_url.startswith("sqlite:////"):
        # absolute path
        return database_url.replace("sqlite:////", "/", 1)

    if database_url.startswith("sqlite:///"):
        # relative to cwd, like SQLAlchemy does it
        return database_url.replace("sqlite:///", "", 1)

    # last resort, hopefully we don't get there
    return database_url.replace("sqlite:", "", 1)

def get_db_path() -> str:
    return _sqlite_path_from_url(settings.database_url)

def connect(db_path: Optional[str] = None, timeout: Optional[float] = None) -> sqlite3.Connection:
    path = db_path or get_db_path()
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    conn = sqlite3.connect(
        path,
        timeout=settings.db_timeout_seconds if timeout is None else timeout,
        check_same_thread=False,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn

def init_db(conn: sqlite3.Connection) -> None:
    conn.executescript(SCHEMA_SQL)
    conn.commit()


class Database:
    """
    Process-wide handle on the tracker database file.

    Built once in the app lifespan and handed to routes through a dependency.
    Every ``transaction()`` gets its own connection: WAL mode lets readers run
    alongside the single writer, and sqlite's busy timeout queues writers
    instead of a lock of our own.
    """

    def __init__(self, path: str, timeout: Optional[float] = None):
        self.path = path
        self.timeout = settings.db_timeout_seconds if timeout is None else timeout
        self._closed = False

    def open(self) -> None:
        conn = connect(self.path, timeout=self.timeout)
        try:
            conn.execute("PRAGMA journal_mode = WAL;")
            init_db(conn)
        finally:
            conn.close()
        logger.info("Connected to SQLite database at %s", self.path)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        if self._closed:
            raise RuntimeError("Database is closed")
        conn = connect(self.path, timeout=self.timeout)
        try:
            # commits on success, rolls back if the body raises
            with conn:
                yield conn
        finally:
            conn.close()

    def close(self) -> None:
        if self._closed:
            return
        conn = connect(self.path, timeout=self.timeout)
        try:
            conn.execute("PRAGMA optimize;")
            conn.execute("PRAGMA wal_checkpoint(TRUNCATE);")
        finally:
            conn.close()
        self._closed = True
        logger.info("Closed SQLite database at %s", self.path)
