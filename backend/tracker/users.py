from __future__ import annotations

from typing import List, Optional
import sqlite3

from backend.tracker.errors import ConflictError, is_unique_violation
from backend.tracker.records import User, new_id

EMAIL_TAKEN = "User with this email already exists"


def _row_to_user(r: sqlite3.Row) -> User:
    return User(
        user_id=str(r["user_id"]),
        name=str(r["name"]),
        email=str(r["email"]),
        auth_provider=r["auth_provider"],
    )


def create_user(
    conn: sqlite3.Connection,
    name: str,
    email: str,
    auth_provider: Optional[str] = None,
) -> User:
    user_id = new_id()
    try:
        conn.execute(
            "INSERT INTO users(user_id, name, email, auth_provider) VALUES(?,?,?,?)",
            (user_id, name, email, auth_provider),
        )
    except sqlite3.IntegrityError as e:
        if is_unique_violation(e, "users.email"):
            raise ConflictError("email", EMAIL_TAKEN) from e
        raise

    return User(user_id=user_id, name=name, email=email, auth_provider=auth_provider)


def get_user(conn: sqlite3.Connection, user_id: str) -> Optional[User]:
    row = conn.execute(
        "SELECT user_id, name, email, auth_provider FROM users WHERE user_id = ?",
        (user_id,),
    ).fetchone()
    return _row_to_user(row) if row else None


def list_users(conn: sqlite3.Connection) -> List[User]:
    rows = conn.execute(
        "SELECT user_id, name, email, auth_provider FROM users ORDER BY name"
    ).fetchall()
    return [_row_to_user(r) for r in rows]


def update_user(
    conn: sqlite3.Connection,
    user_id: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
    auth_provider: Optional[str] = None,
) -> Optional[User]:
    """
    Partial update: a None argument leaves that column as it is.

    The UPDATE itself decides whether the user exists (rowcount), and the
    re-read happens before the caller's transaction commits, so a concurrent
    delete can't slip in between.
    """
    try:
        cur = conn.execute(
            """
            UPDATE users
            SET name = COALESCE(?, name),
                email = COALESCE(?, email),
                auth_provider = COALESCE(?, auth_provider)
            WHERE user_id = ?
            """,
            (name, email, auth_provider, user_id),
        )
    except sqlite3.IntegrityError as e:
        if is_unique_violation(e, "users.email"):
            raise ConflictError("email", EMAIL_TAKEN) from e
        raise

    if cur.rowcount == 0:
        return None
    return get_user(conn, user_id)


def delete_user(conn: sqlite3.Connection, user_id: str) -> bool:
    # ratings, activities, favorites, recommendations go with it (ON DELETE CASCADE)
    cur = conn.execute("DELETE FROM users WHERE user_id = ?", (user_id,))
    return cur.rowcount > 0
