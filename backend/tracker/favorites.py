from __future__ import annotations

from typing import List
import sqlite3

from backend.tracker.records import Favorite, utc_now


def add_favorite(conn: sqlite3.Connection, user_id: str, media_id: str) -> Favorite:
    # re-adding keeps the first added_at
    conn.execute(
        "INSERT OR IGNORE INTO favorites(user_id, media_id, added_at) VALUES(?,?,?)",
        (user_id, media_id, utc_now()),
    )
    row = conn.execute(
        "SELECT user_id, media_id, added_at FROM favorites WHERE user_id = ? AND media_id = ?",
        (user_id, media_id),
    ).fetchone()
    return Favorite(user_id=str(row["user_id"]), media_id=str(row["media_id"]), added_at=str(row["added_at"]))


def list_favorites(conn: sqlite3.Connection, user_id: str) -> List[Favorite]:
    rows = conn.execute(
        """
        SELECT user_id, media_id, added_at
        FROM favorites
        WHERE user_id = ?
        ORDER BY added_at DESC
        """,
        (user_id,),
    ).fetchall()
    return [
        Favorite(user_id=str(r["user_id"]), media_id=str(r["media_id"]), added_at=str(r["added_at"]))
        for r in rows
    ]


def remove_favorite(conn: sqlite3.Connection, user_id: str, media_id: str) -> bool:
    cur = conn.execute(
        "DELETE FROM favorites WHERE user_id = ? AND media_id = ?",
        (user_id, media_id),
    )
    return cur.rowcount > 0
