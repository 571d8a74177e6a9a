from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
import uuid

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> str:
    return datetime.now(timezone.utc).strftime(TIMESTAMP_FORMAT)


@dataclass
class User:
    user_id: str
    name: str
    email: str
    auth_provider: Optional[str] = None


@dataclass
class MediaType:
    type_id: int
    type_name: str


@dataclass
class CreatorRole:
    role_id: int
    role_name: str


@dataclass
class ActivityStatus:
    status_id: int
    name: str


@dataclass
class Platform:
    platform_id: str
    name: str
    base_url: Optional[str] = None


@dataclass
class MediaItem:
    media_id: str
    title: str
    type_id: int
    release_date: Optional[str] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None


@dataclass
class Creator:
    creator_id: str
    name: str
    role_id: int


@dataclass
class Tag:
    tag_id: str
    name: str
    tag_type: str


@dataclass
class MediaCreator:
    media_id: str
    creator_id: str


@dataclass
class MediaPlatform:
    media_id: str
    platform_id: str
    external_id: Optional[str] = None


@dataclass
class MediaTag:
    media_id: str
    tag_id: str


@dataclass
class ExternalId:
    media_id: str
    platform_id: str
    external_id: str


@dataclass
class UserActivity:
    activity_id: str
    user_id: str
    media_id: str
    status_id: int
    rating: Optional[float] = None
    review: Optional[str] = None
    started_at: Optional[str] = None
    finished_at: Optional[str] = None
    source_platform: Optional[str] = None


@dataclass
class Rating:
    user_id: str
    media_id: str
    score: float
    rated_at: str


@dataclass
class RatingSummary:
    media_id: str
    average: Optional[float]
    count: int


@dataclass
class Favorite:
    user_id: str
    media_id: str
    added_at: str


@dataclass
class Recommendation:
    recommendation_id: str
    user_id: str
    media_id: str
    recommender_id: Optional[str] = None
    source: Optional[str] = None
    score: Optional[float] = None
