from __future__ import annotations

from typing import List, Optional
import sqlite3

from backend.tracker.records import UserActivity, new_id

_COLUMNS = (
    "activity_id, user_id, media_id, status_id, rating, review, "
    "started_at, finished_at, source_platform"
)


def _row_to_activity(r: sqlite3.Row) -> UserActivity:
    return UserActivity(
        activity_id=str(r["activity_id"]),
        user_id=str(r["user_id"]),
        media_id=str(r["media_id"]),
        status_id=int(r["status_id"]),
        rating=float(r["rating"]) if r["rating"] is not None else None,
        review=r["review"],
        started_at=r["started_at"],
        finished_at=r["finished_at"],
        source_platform=r["source_platform"],
    )


def create_activity(
    conn: sqlite3.Connection,
    user_id: str,
    media_id: str,
    status_id: int,
    rating: Optional[float] = None,
    review: Optional[str] = None,
    started_at: Optional[str] = None,
    finished_at: Optional[str] = None,
    source_platform: Optional[str] = None,
) -> UserActivity:
    """
    Appends a history entry. Earlier entries for the same (user, media) are
    kept, so a status change is a new row rather than an edit.
    """
    activity = UserActivity(
        activity_id=new_id(),
        user_id=user_id,
        media_id=media_id,
        status_id=status_id,
        rating=rating,
        review=review,
        started_at=started_at,
        finished_at=finished_at,
        source_platform=source_platform,
    )
    conn.execute(
        f"INSERT INTO user_activities({_COLUMNS}) VALUES(?,?,?,?,?,?,?,?,?)",
        (
            activity.activity_id,
            activity.user_id,
            activity.media_id,
            activity.status_id,
            activity.rating,
            activity.review,
            activity.started_at,
            activity.finished_at,
            activity.source_platform,
        ),
    )
    return activity


def get_activity(conn: sqlite3.Connection, activity_id: str) -> Optional[UserActivity]:
    row = conn.execute(
        f"SELECT {_COLUMNS} FROM user_activities WHERE activity_id = ?",
        (activity_id,),
    ).fetchone()
    return _row_to_activity(row) if row else None


def list_user_activities(conn: sqlite3.Connection, user_id: str) -> List[UserActivity]:
    # NULL started_at sorts last under DESC in sqlite
    rows = conn.execute(
        f"""
        SELECT {_COLUMNS}
        FROM user_activities
        WHERE user_id = ?
        ORDER BY started_at DESC
        """,
        (user_id,),
    ).fetchall()
    return [_row_to_activity(r) for r in rows]


def list_media_activities(conn: sqlite3.Connection, media_id: str) -> List[UserActivity]:
    rows = conn.execute(
        f"""
        SELECT {_COLUMNS}
        FROM user_activities
        WHERE media_id = ?
        ORDER BY started_at DESC
        """,
        (media_id,),
    ).fetchall()
    return [_row_to_activity(r) for r in rows]


def delete_activity(conn: sqlite3.Connection, activity_id: str) -> bool:
    cur = conn.execute("DELETE FROM user_activities WHERE activity_id = ?", (activity_id,))
    return cur.rowcount > 0
