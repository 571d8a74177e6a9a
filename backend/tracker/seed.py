from __future__ import annotations

from typing import List, Optional, Tuple
import logging
import sqlite3

from backend.app.schema import ALL_TABLES
from backend.tracker.records import new_id

logger = logging.getLogger(__name__)

MEDIA_TYPES = ["Movie", "TV Show", "Book", "Game", "Music"]

CREATOR_ROLES = ["Director", "Actor", "Author", "Developer", "Artist"]

ACTIVITY_STATUSES = [
    "Want to Watch/Read/Play",
    "Currently Watching/Reading/Playing",
    "Completed",
    "Dropped",
    "On Hold",
]

PLATFORMS: List[Tuple[str, str]] = [
    ("Netflix", "https://netflix.com"),
    ("Amazon Prime", "https://amazon.com/prime"),
    ("Steam", "https://steam.com"),
]

SAMPLE_USERS: List[Tuple[str, str, Optional[str]]] = [
    ("John Doe", "john.doe@example.com", None),
    ("Jane Smith", "jane.smith@example.com", None),
    ("Bob Johnson", "bob.johnson@example.com", None),
]


def seed_sample_data(conn: sqlite3.Connection) -> bool:
    """
    First-boot seed: reference rows plus a few sample users.

    An existing user means the database was already seeded (or is in use),
    so nothing is written. Returns True when rows were inserted.
    """
    row = conn.execute("SELECT COUNT(*) AS c FROM users").fetchone()
    if row and int(row["c"]) > 0:
        return False

    conn.executemany(
        "INSERT OR IGNORE INTO media_types(type_name) VALUES(?)",
        [(name,) for name in MEDIA_TYPES],
    )
    conn.executemany(
        "INSERT OR IGNORE INTO creator_roles(role_name) VALUES(?)",
        [(name,) for name in CREATOR_ROLES],
    )
    conn.executemany(
        "INSERT OR IGNORE INTO activity_statuses(name) VALUES(?)",
        [(name,) for name in ACTIVITY_STATUSES],
    )
    conn.executemany(
        "INSERT OR IGNORE INTO platforms(platform_id, name, base_url) VALUES(?,?,?)",
        [(new_id(), name, base_url) for name, base_url in PLATFORMS],
    )
    conn.executemany(
        "INSERT INTO users(user_id, name, email, auth_provider) VALUES(?,?,?,?)",
        [(new_id(), name, email, auth_provider) for name, email, auth_provider in SAMPLE_USERS],
    )

    logger.info("Seeded database with %d sample users and reference data", len(SAMPLE_USERS))
    return True


def clear_tables(conn: sqlite3.Connection) -> None:
    for table in ALL_TABLES:
        conn.execute(f"DELETE FROM {table};")
    # restart AUTOINCREMENT ids so reference rows get 1..n again
    conn.execute("DELETE FROM sqlite_sequence;")
