from __future__ import annotations

from typing import List, Optional
import sqlite3

from backend.tracker.records import Recommendation, new_id


def create_recommendation(
    conn: sqlite3.Connection,
    user_id: str,
    media_id: str,
    recommender_id: Optional[str] = None,   # another user; None for system picks
    source: Optional[str] = None,
    score: Optional[float] = None,
) -> Recommendation:
    rec = Recommendation(
        recommendation_id=new_id(),
        user_id=user_id,
        media_id=media_id,
        recommender_id=recommender_id,
        source=source,
        score=score,
    )
    conn.execute(
        """
        INSERT INTO recommendations(recommendation_id, user_id, media_id, recommender_id, source, score)
        VALUES(?,?,?,?,?,?)
        """,
        (rec.recommendation_id, rec.user_id, rec.media_id, rec.recommender_id, rec.source, rec.score),
    )
    return rec


def list_recommendations(conn: sqlite3.Connection, user_id: str) -> List[Recommendation]:
    rows = conn.execute(
        """
        SELECT recommendation_id, user_id, media_id, recommender_id, source, score
        FROM recommendations
        WHERE user_id = ?
        ORDER BY score IS NULL, score DESC
        """,
        (user_id,),
    ).fetchall()
    return [
        Recommendation(
            recommendation_id=str(r["recommendation_id"]),
            user_id=str(r["user_id"]),
            media_id=str(r["media_id"]),
            recommender_id=r["recommender_id"],
            source=r["source"],
            score=float(r["score"]) if r["score"] is not None else None,
        )
        for r in rows
    ]


def delete_recommendation(conn: sqlite3.Connection, recommendation_id: str) -> bool:
    cur = conn.execute(
        "DELETE FROM recommendations WHERE recommendation_id = ?",
        (recommendation_id,),
    )
    return cur.rowcount > 0
