"""
Reference tables plus the creator/tag/platform side of the catalog.

Media types, creator roles, activity statuses and platforms are fixtures
written by the first-boot seed; here they are only read.
"""
from __future__ import annotations

from typing import List, Optional
import sqlite3

from backend.tracker.records import (
    ActivityStatus,
    Creator,
    CreatorRole,
    ExternalId,
    MediaCreator,
    MediaPlatform,
    MediaTag,
    MediaType,
    Platform,
    Tag,
    new_id,
)


# Reference data

def list_media_types(conn: sqlite3.Connection) -> List[MediaType]:
    rows = conn.execute("SELECT type_id, type_name FROM media_types ORDER BY type_name").fetchall()
    return [MediaType(type_id=int(r["type_id"]), type_name=str(r["type_name"])) for r in rows]


def list_creator_roles(conn: sqlite3.Connection) -> List[CreatorRole]:
    rows = conn.execute("SELECT role_id, role_name FROM creator_roles ORDER BY role_name").fetchall()
    return [CreatorRole(role_id=int(r["role_id"]), role_name=str(r["role_name"])) for r in rows]


def list_activity_statuses(conn: sqlite3.Connection) -> List[ActivityStatus]:
    rows = conn.execute("SELECT status_id, name FROM activity_statuses ORDER BY name").fetchall()
    return [ActivityStatus(status_id=int(r["status_id"]), name=str(r["name"])) for r in rows]


def list_platforms(conn: sqlite3.Connection) -> List[Platform]:
    rows = conn.execute("SELECT platform_id, name, base_url FROM platforms ORDER BY name").fetchall()
    return [
        Platform(platform_id=str(r["platform_id"]), name=str(r["name"]), base_url=r["base_url"])
        for r in rows
    ]


# Creators

def create_creator(conn: sqlite3.Connection, name: str, role_id: int) -> Creator:
    creator_id = new_id()
    conn.execute(
        "INSERT INTO creators(creator_id, name, role_id) VALUES(?,?,?)",
        (creator_id, name, role_id),
    )
    return Creator(creator_id=creator_id, name=name, role_id=role_id)


def list_creators(conn: sqlite3.Connection) -> List[Creator]:
    rows = conn.execute("SELECT creator_id, name, role_id FROM creators ORDER BY name").fetchall()
    return [
        Creator(creator_id=str(r["creator_id"]), name=str(r["name"]), role_id=int(r["role_id"]))
        for r in rows
    ]


def link_creator(conn: sqlite3.Connection, media_id: str, creator_id: str) -> MediaCreator:
    # linking twice is a no-op
    conn.execute(
        "INSERT OR IGNORE INTO media_creators(media_id, creator_id) VALUES(?,?)",
        (media_id, creator_id),
    )
    return MediaCreator(media_id=media_id, creator_id=creator_id)


def list_media_creators(conn: sqlite3.Connection, media_id: str) -> List[Creator]:
    rows = conn.execute(
        """
        SELECT c.creator_id, c.name, c.role_id
        FROM media_creators mc
        JOIN creators c ON c.creator_id = mc.creator_id
        WHERE mc.media_id = ?
        ORDER BY c.name
        """,
        (media_id,),
    ).fetchall()
    return [
        Creator(creator_id=str(r["creator_id"]), name=str(r["name"]), role_id=int(r["role_id"]))
        for r in rows
    ]


# Tags

def create_tag(conn: sqlite3.Connection, name: str, tag_type: str) -> Tag:
    tag_id = new_id()
    conn.execute(
        "INSERT INTO tags(tag_id, name, tag_type) VALUES(?,?,?)",
        (tag_id, name, tag_type),
    )
    return Tag(tag_id=tag_id, name=name, tag_type=tag_type)


def list_tags(conn: sqlite3.Connection) -> List[Tag]:
    rows = conn.execute("SELECT tag_id, name, tag_type FROM tags ORDER BY name").fetchall()
    return [Tag(tag_id=str(r["tag_id"]), name=str(r["name"]), tag_type=str(r["tag_type"])) for r in rows]


def tag_media(conn: sqlite3.Connection, media_id: str, tag_id: str) -> MediaTag:
    conn.execute(
        "INSERT OR IGNORE INTO media_tags(media_id, tag_id) VALUES(?,?)",
        (media_id, tag_id),
    )
    return MediaTag(media_id=media_id, tag_id=tag_id)


def list_media_tags(conn: sqlite3.Connection, media_id: str) -> List[Tag]:
    rows = conn.execute(
        """
        SELECT t.tag_id, t.name, t.tag_type
        FROM media_tags mt
        JOIN tags t ON t.tag_id = mt.tag_id
        WHERE mt.media_id = ?
        ORDER BY t.name
        """,
        (media_id,),
    ).fetchall()
    return [Tag(tag_id=str(r["tag_id"]), name=str(r["name"]), tag_type=str(r["tag_type"])) for r in rows]


# Availability and external ids

def add_media_platform(
    conn: sqlite3.Connection,
    media_id: str,
    platform_id: str,
    external_id: Optional[str] = None,
) -> MediaPlatform:
    conn.execute(
        """
        INSERT INTO media_platforms(media_id, platform_id, external_id)
        VALUES(?,?,?)
        ON CONFLICT(media_id, platform_id)
        DO UPDATE SET external_id = excluded.external_id
        """,
        (media_id, platform_id, external_id),
    )
    return MediaPlatform(media_id=media_id, platform_id=platform_id, external_id=external_id)


def list_media_platforms(conn: sqlite3.Connection, media_id: str) -> List[MediaPlatform]:
    rows = conn.execute(
        """
        SELECT mp.media_id, mp.platform_id, mp.external_id
        FROM media_platforms mp
        JOIN platforms p ON p.platform_id = mp.platform_id
        WHERE mp.media_id = ?
        ORDER BY p.name
        """,
        (media_id,),
    ).fetchall()
    return [
        MediaPlatform(
            media_id=str(r["media_id"]),
            platform_id=str(r["platform_id"]),
            external_id=r["external_id"],
        )
        for r in rows
    ]


def set_external_id(
    conn: sqlite3.Connection,
    media_id: str,
    platform_id: str,
    external_id: str,
) -> ExternalId:
    conn.execute(
        """
        INSERT INTO external_ids(media_id, platform_id, external_id)
        VALUES(?,?,?)
        ON CONFLICT(media_id, platform_id)
        DO UPDATE SET external_id = excluded.external_id
        """,
        (media_id, platform_id, external_id),
    )
    return ExternalId(media_id=media_id, platform_id=platform_id, external_id=external_id)


def list_external_ids(conn: sqlite3.Connection, media_id: str) -> List[ExternalId]:
    rows = conn.execute(
        """
        SELECT media_id, platform_id, external_id
        FROM external_ids
        WHERE media_id = ?
        ORDER BY platform_id
        """,
        (media_id,),
    ).fetchall()
    return [
        ExternalId(
            media_id=str(r["media_id"]),
            platform_id=str(r["platform_id"]),
            external_id=str(r["external_id"]),
        )
        for r in rows
    ]
