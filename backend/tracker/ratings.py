from __future__ import annotations

from typing import List, Optional
import sqlite3

from backend.tracker.records import Rating, RatingSummary, utc_now


def _row_to_rating(r: sqlite3.Row) -> Rating:
    return Rating(
        user_id=str(r["user_id"]),
        media_id=str(r["media_id"]),
        score=float(r["score"]),
        rated_at=str(r["rated_at"]),
    )


def upsert_rating(conn: sqlite3.Connection, user_id: str, media_id: str, score: float) -> Rating:
    """
    One rating per (user, media): a re-submission overwrites the score and
    moves rated_at to now.
    """
    rated_at = utc_now()
    conn.execute(
        """
        INSERT INTO ratings(user_id, media_id, score, rated_at)
        VALUES(?,?,?,?)
        ON CONFLICT(user_id, media_id)
        DO UPDATE SET score = excluded.score, rated_at = excluded.rated_at
        """,
        (user_id, media_id, score, rated_at),
    )
    return Rating(user_id=user_id, media_id=media_id, score=score, rated_at=rated_at)


def get_rating(conn: sqlite3.Connection, user_id: str, media_id: str) -> Optional[Rating]:
    row = conn.execute(
        """
        SELECT user_id, media_id, score, rated_at
        FROM ratings
        WHERE user_id = ? AND media_id = ?
        """,
        (user_id, media_id),
    ).fetchone()
    return _row_to_rating(row) if row else None


def list_user_ratings(conn: sqlite3.Connection, user_id: str) -> List[Rating]:
    rows = conn.execute(
        """
        SELECT user_id, media_id, score, rated_at
        FROM ratings
        WHERE user_id = ?
        ORDER BY rated_at DESC
        """,
        (user_id,),
    ).fetchall()
    return [_row_to_rating(r) for r in rows]


def delete_rating(conn: sqlite3.Connection, user_id: str, media_id: str) -> bool:
    cur = conn.execute(
        "DELETE FROM ratings WHERE user_id = ? AND media_id = ?",
        (user_id, media_id),
    )
    return cur.rowcount > 0


def media_rating_summary(conn: sqlite3.Connection, media_id: str) -> RatingSummary:
    row = conn.execute(
        "SELECT AVG(score) AS avg_score, COUNT(*) AS c FROM ratings WHERE media_id = ?",
        (media_id,),
    ).fetchone()
    count = int(row["c"]) if row else 0
    average = float(row["avg_score"]) if count else None
    return RatingSummary(media_id=media_id, average=average, count=count)
