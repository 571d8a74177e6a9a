from contextlib import asynccontextmanager
import logging
import sqlite3

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.config import settings
from backend.app.logging_setup import setup_logging
from backend.app.db import Database, get_db_path
from backend.app import models
from backend.tracker import activities, catalog, favorites, media, ratings, recommendations, users
from backend.tracker.errors import ConflictError
from backend.tracker.seed import seed_sample_data

setup_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # a database we can't open is fatal, let it propagate
    db = Database(get_db_path())
    db.open()

    if settings.seed_sample_data:
        try:
            with db.transaction() as conn:
                seed_sample_data(conn)
        except Exception:
            # the API is still usable without sample data
            logger.exception("Failed to seed sample data")

    app.state.db = db
    yield
    db.close()


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    lifespan=lifespan,
)

if settings.cors_origins_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def get_db(request: Request) -> Database:
    return request.app.state.db


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    logger.warning("%s %s rejected: duplicate %s", request.method, request.url.path, exc.field)
    return JSONResponse(status_code=409, content={"detail": exc.message})


@app.exception_handler(sqlite3.Error)
async def storage_error_handler(request: Request, exc: sqlite3.Error):
    # details stay in the server log
    logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def _not_found(what: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{what} not found")


@app.get("/health")
def health():
    return {
        "status": "healthy",
        "service": settings.app_name,
        "database": "SQLite",
    }


# Users
@app.get("/users")
def list_users(db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return users.list_users(conn)


@app.post("/users", status_code=201)
def create_user(body: models.CreateUserRequest, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return users.create_user(conn, body.name, body.email, body.auth_provider)


@app.get("/users/{user_id}")
def get_user(user_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        user = users.get_user(conn, user_id)
    if user is None:
        raise _not_found("User")
    return user


@app.patch("/users/{user_id}")
def update_user(user_id: str, body: models.UpdateUserRequest, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        user = users.update_user(
            conn,
            user_id,
            name=body.name,
            email=body.email,
            auth_provider=body.auth_provider,
        )
    if user is None:
        raise _not_found("User")
    return user


@app.delete("/users/{user_id}", status_code=204)
def delete_user(user_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        deleted = users.delete_user(conn, user_id)
    if not deleted:
        raise _not_found("User")
    return Response(status_code=204)


# Media catalog
@app.get("/media")
def list_media_items(db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return media.list_media_items(conn)


@app.post("/media", status_code=201)
def create_media_item(body: models.CreateMediaItemRequest, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return media.create_media_item(
            conn,
            title=body.title,
            type_id=body.type_id,
            release_date=body.release_date,
            description=body.description,
            cover_url=body.cover_url,
        )


@app.get("/media/{media_id}")
def get_media_item(media_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        item = media.get_media_item(conn, media_id)
    if item is None:
        raise _not_found("Media item")
    return item


@app.delete("/media/{media_id}", status_code=204)
def delete_media_item(media_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        deleted = media.delete_media_item(conn, media_id)
    if not deleted:
        raise _not_found("Media item")
    return Response(status_code=204)


@app.get("/media/{media_id}/ratings/summary")
def media_rating_summary(media_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return ratings.media_rating_summary(conn, media_id)


@app.get("/media/{media_id}/activities")
def list_media_activities(media_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return activities.list_media_activities(conn, media_id)


@app.get("/media/{media_id}/creators")
def list_media_creators(media_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return catalog.list_media_creators(conn, media_id)


@app.post("/media/{media_id}/creators", status_code=201)
def link_creator(media_id: str, body: models.LinkCreatorRequest, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return catalog.link_creator(conn, media_id, body.creator_id)


@app.get("/media/{media_id}/tags")
def list_media_tags(media_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return catalog.list_media_tags(conn, media_id)


@app.post("/media/{media_id}/tags", status_code=201)
def tag_media(media_id: str, body: models.LinkTagRequest, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return catalog.tag_media(conn, media_id, body.tag_id)


@app.get("/media/{media_id}/platforms")
def list_media_platforms(media_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return catalog.list_media_platforms(conn, media_id)


@app.post("/media/{media_id}/platforms", status_code=201)
def add_media_platform(media_id: str, body: models.LinkPlatformRequest, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return catalog.add_media_platform(conn, media_id, body.platform_id, body.external_id)


@app.get("/media/{media_id}/external-ids")
def list_external_ids(media_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return catalog.list_external_ids(conn, media_id)


@app.post("/media/{media_id}/external-ids", status_code=201)
def set_external_id(media_id: str, body: models.SetExternalIdRequest, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return catalog.set_external_id(conn, media_id, body.platform_id, body.external_id)


# Reference data (read-only, seeded on first boot)
@app.get("/media-types")
def list_media_types(db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return catalog.list_media_types(conn)


@app.get("/creator-roles")
def list_creator_roles(db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return catalog.list_creator_roles(conn)


@app.get("/activity-statuses")
def list_activity_statuses(db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return catalog.list_activity_statuses(conn)


@app.get("/platforms")
def list_platforms(db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return catalog.list_platforms(conn)


# Creators and tags
@app.get("/creators")
def list_creators(db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return catalog.list_creators(conn)


@app.post("/creators", status_code=201)
def create_creator(body: models.CreateCreatorRequest, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return catalog.create_creator(conn, body.name, body.role_id)


@app.get("/tags")
def list_tags(db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return catalog.list_tags(conn)


@app.post("/tags", status_code=201)
def create_tag(body: models.CreateTagRequest, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return catalog.create_tag(conn, body.name, body.tag_type)


# Ratings
@app.post("/users/{user_id}/ratings", status_code=201)
def create_rating(user_id: str, body: models.CreateRatingRequest, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return ratings.upsert_rating(conn, user_id, body.media_id, body.score)


@app.get("/users/{user_id}/ratings")
def list_user_ratings(user_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return ratings.list_user_ratings(conn, user_id)


@app.get("/users/{user_id}/ratings/{media_id}")
def get_rating(user_id: str, media_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        rating = ratings.get_rating(conn, user_id, media_id)
    if rating is None:
        raise _not_found("Rating")
    return rating


@app.delete("/users/{user_id}/ratings/{media_id}", status_code=204)
def delete_rating(user_id: str, media_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        deleted = ratings.delete_rating(conn, user_id, media_id)
    if not deleted:
        raise _not_found("Rating")
    return Response(status_code=204)


# Activity log
@app.get("/users/{user_id}/activities")
def list_user_activities(user_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return activities.list_user_activities(conn, user_id)


@app.post("/users/{user_id}/activities", status_code=201)
def create_user_activity(
    user_id: str,
    body: models.CreateUserActivityRequest,
    db: Database = Depends(get_db),
):
    with db.transaction() as conn:
        return activities.create_activity(
            conn,
            user_id=user_id,
            media_id=body.media_id,
            status_id=body.status_id,
            rating=body.rating,
            review=body.review,
            started_at=body.started_at,
            finished_at=body.finished_at,
            source_platform=body.source_platform,
        )


@app.get("/activities/{activity_id}")
def get_activity(activity_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        activity = activities.get_activity(conn, activity_id)
    if activity is None:
        raise _not_found("Activity")
    return activity


@app.delete("/activities/{activity_id}", status_code=204)
def delete_activity(activity_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        deleted = activities.delete_activity(conn, activity_id)
    if not deleted:
        raise _not_found("Activity")
    return Response(status_code=204)


# Favorites
@app.get("/users/{user_id}/favorites")
def list_favorites(user_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return favorites.list_favorites(conn, user_id)


@app.post("/users/{user_id}/favorites", status_code=201)
def add_favorite(user_id: str, body: models.FavoriteRequest, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return favorites.add_favorite(conn, user_id, body.media_id)


@app.delete("/users/{user_id}/favorites/{media_id}", status_code=204)
def remove_favorite(user_id: str, media_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        removed = favorites.remove_favorite(conn, user_id, media_id)
    if not removed:
        raise _not_found("Favorite")
    return Response(status_code=204)


# Recommendations
@app.get("/users/{user_id}/recommendations")
def list_recommendations(user_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        return recommendations.list_recommendations(conn, user_id)


@app.post("/users/{user_id}/recommendations", status_code=201)
def create_recommendation(
    user_id: str,
    body: models.CreateRecommendationRequest,
    db: Database = Depends(get_db),
):
    with db.transaction() as conn:
        return recommendations.create_recommendation(
            conn,
            user_id=user_id,
            media_id=body.media_id,
            recommender_id=body.recommender_id,
            source=body.source,
            score=body.score,
        )


@app.delete("/recommendations/{recommendation_id}", status_code=204)
def delete_recommendation(recommendation_id: str, db: Database = Depends(get_db)):
    with db.transaction() as conn:
        deleted = recommendations.delete_recommendation(conn, recommendation_id)
    if not deleted:
        raise _not_found("Recommendation")
    return Response(status_code=204)


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting %s at http://%s:%d", settings.app_name, settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)
