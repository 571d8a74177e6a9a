from __future__ import annotations

from typing import List, Optional
import sqlite3

from backend.tracker.records import MediaItem, new_id

_COLUMNS = "media_id, title, type_id, release_date, description, cover_url"


def _row_to_media(r: sqlite3.Row) -> MediaItem:
    return MediaItem(
        media_id=str(r["media_id"]),
        title=str(r["title"]),
        type_id=int(r["type_id"]),
        release_date=r["release_date"],
        description=r["description"],
        cover_url=r["cover_url"],
    )


def create_media_item(
    conn: sqlite3.Connection,
    title: str,
    type_id: int,
    release_date: Optional[str] = None,
    description: Optional[str] = None,
    cover_url: Optional[str] = None,
) -> MediaItem:
    media_id = new_id()
    conn.execute(
        f"INSERT INTO media_items({_COLUMNS}) VALUES(?,?,?,?,?,?)",
        (media_id, title, type_id, release_date, description, cover_url),
    )
    return MediaItem(
        media_id=media_id,
        title=title,
        type_id=type_id,
        release_date=release_date,
        description=description,
        cover_url=cover_url,
    )


def get_media_item(conn: sqlite3.Connection, media_id: str) -> Optional[MediaItem]:
    row = conn.execute(
        f"SELECT {_COLUMNS} FROM media_items WHERE media_id = ?",
        (media_id,),
    ).fetchone()
    return _row_to_media(row) if row else None


def list_media_items(conn: sqlite3.Connection) -> List[MediaItem]:
    rows = conn.execute(f"SELECT {_COLUMNS} FROM media_items ORDER BY title").fetchall()
    return [_row_to_media(r) for r in rows]


def delete_media_item(conn: sqlite3.Connection, media_id: str) -> bool:
    cur = conn.execute("DELETE FROM media_items WHERE media_id = ?", (media_id,))
    return cur.rowcount > 0
