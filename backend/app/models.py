from pydantic import BaseModel


# Request bodies. Response bodies are the dataclasses in backend.tracker.records.

class CreateUserRequest(BaseModel):
    name: str
    email: str
    auth_provider: str | None = None


class UpdateUserRequest(BaseModel):
    # omitted (or null) fields are left unchanged
    name: str | None = None
    email: str | None = None
    auth_provider: str | None = None


class CreateMediaItemRequest(BaseModel):
    title: str
    type_id: int
    release_date: str | None = None
    description: str | None = None
    cover_url: str | None = None


class CreateRatingRequest(BaseModel):
    media_id: str
    score: float


class CreateUserActivityRequest(BaseModel):
    media_id: str
    status_id: int
    rating: float | None = None
    review: str | None = None
    started_at: str | None = None
    finished_at: str | None = None
    source_platform: str | None = None  # platform_id


class CreateCreatorRequest(BaseModel):
    name: str
    role_id: int


class CreateTagRequest(BaseModel):
    name: str
    tag_type: str


class LinkCreatorRequest(BaseModel):
    creator_id: str


class LinkTagRequest(BaseModel):
    tag_id: str


class LinkPlatformRequest(BaseModel):
    platform_id: str
    external_id: str | None = None


class SetExternalIdRequest(BaseModel):
    platform_id: str
    external_id: str


class FavoriteRequest(BaseModel):
    media_id: str


class CreateRecommendationRequest(BaseModel):
    media_id: str
    recommender_id: str | None = None
    source: str | None = None
    score: float | None = None
