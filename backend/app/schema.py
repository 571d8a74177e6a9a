SCHEMA_SQL = """
PRAGMA foreign_keys = ON;

CREATE TABLE IF NOT EXISTS users (
  user_id       TEXT PRIMARY KEY,             -- UUID string
  name          TEXT NOT NULL,
  email         TEXT NOT NULL UNIQUE,
  auth_provider TEXT                          -- 'google' | 'github' | NULL
);

-- reference tables (seeded on first boot, never edited through the API)

CREATE TABLE IF NOT EXISTS media_types (
  type_id   INTEGER PRIMARY KEY AUTOINCREMENT,
  type_name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS creator_roles (
  role_id   INTEGER PRIMARY KEY AUTOINCREMENT,
  role_name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS activity_statuses (
  status_id INTEGER PRIMARY KEY AUTOINCREMENT,
  name      TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS platforms (
  platform_id TEXT PRIMARY KEY,
  name        TEXT NOT NULL UNIQUE,
  base_url    TEXT
);

-- catalog

CREATE TABLE IF NOT EXISTS media_items (
  media_id     TEXT PRIMARY KEY,
  title        TEXT NOT NULL,
  type_id      INTEGER NOT NULL,
  release_date TEXT,
  description  TEXT,
  cover_url    TEXT,
  FOREIGN KEY (type_id) REFERENCES media_types(type_id)
);

CREATE INDEX IF NOT EXISTS idx_media_items_title ON media_items(title);

CREATE TABLE IF NOT EXISTS creators (
  creator_id TEXT PRIMARY KEY,
  name       TEXT NOT NULL,
  role_id    INTEGER NOT NULL,
  FOREIGN KEY (role_id) REFERENCES creator_roles(role_id)
);

CREATE TABLE IF NOT EXISTS tags (
  tag_id   TEXT PRIMARY KEY,
  name     TEXT NOT NULL,
  tag_type TEXT NOT NULL                      -- 'genre' | 'mood' | free-form
);

-- junction tables

CREATE TABLE IF NOT EXISTS media_creators (
  media_id   TEXT NOT NULL,
  creator_id TEXT NOT NULL,
  PRIMARY KEY (media_id, creator_id),
  FOREIGN KEY (media_id) REFERENCES media_items(media_id) ON DELETE CASCADE,
  FOREIGN KEY (creator_id) REFERENCES creators(creator_id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS media_platforms (
  media_id    TEXT NOT NULL,
  platform_id TEXT NOT NULL,
  external_id TEXT,
  PRIMARY KEY (media_id, platform_id),
  FOREIGN KEY (media_id) REFERENCES media_items(media_id) ON DELETE CASCADE,
  FOREIGN KEY (platform_id) REFERENCES platforms(platform_id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS media_tags (
  media_id TEXT NOT NULL,
  tag_id   TEXT NOT NULL,
  PRIMARY KEY (media_id, tag_id),
  FOREIGN KEY (media_id) REFERENCES media_items(media_id) ON DELETE CASCADE,
  FOREIGN KEY (tag_id) REFERENCES tags(tag_id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS external_ids (
  media_id    TEXT NOT NULL,
  platform_id TEXT NOT NULL,
  external_id TEXT NOT NULL,
  PRIMARY KEY (media_id, platform_id),
  FOREIGN KEY (media_id) REFERENCES media_items(media_id) ON DELETE CASCADE,
  FOREIGN KEY (platform_id) REFERENCES platforms(platform_id) ON DELETE CASCADE
);

-- per-user engagement

CREATE TABLE IF NOT EXISTS user_activities (
  activity_id     TEXT PRIMARY KEY,
  user_id         TEXT NOT NULL,
  media_id        TEXT NOT NULL,
  status_id       INTEGER NOT NULL,
  rating          REAL,
  review          TEXT,
  started_at      TEXT,
  finished_at     TEXT,
  source_platform TEXT,
  FOREIGN KEY (user_id) REFERENCES users(user_id) ON DELETE CASCADE,
  FOREIGN KEY (media_id) REFERENCES media_items(media_id) ON DELETE CASCADE,
  FOREIGN KEY (status_id) REFERENCES activity_statuses(status_id),
  FOREIGN KEY (source_platform) REFERENCES platforms(platform_id) ON DELETE SET NULL
);

CREATE INDEX IF NOT EXISTS idx_user_activities_user_started
ON user_activities(user_id, started_at);

CREATE INDEX IF NOT EXISTS idx_user_activities_media
ON user_activities(media_id);

CREATE TABLE IF NOT EXISTS ratings (
  user_id  TEXT NOT NULL,
  media_id TEXT NOT NULL,
  score    REAL NOT NULL,
  rated_at TEXT NOT NULL,                     -- UTC 'YYYY-MM-DD HH:MM:SS'
  PRIMARY KEY (user_id, media_id),
  FOREIGN KEY (user_id) REFERENCES users(user_id) ON DELETE CASCADE,
  FOREIGN KEY (media_id) REFERENCES media_items(media_id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_ratings_media ON ratings(media_id);

CREATE TABLE IF NOT EXISTS favorites (
  user_id  TEXT NOT NULL,
  media_id TEXT NOT NULL,
  added_at TEXT NOT NULL,
  PRIMARY KEY (user_id, media_id),
  FOREIGN KEY (user_id) REFERENCES users(user_id) ON DELETE CASCADE,
  FOREIGN KEY (media_id) REFERENCES media_items(media_id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS recommendations (
  recommendation_id TEXT PRIMARY KEY,
  user_id           TEXT NOT NULL,
  media_id          TEXT NOT NULL,
  recommender_id    TEXT,                     -- another user, NULL for system picks
  source            TEXT,
  score             REAL,
  FOREIGN KEY (user_id) REFERENCES users(user_id) ON DELETE CASCADE,
  FOREIGN KEY (media_id) REFERENCES media_items(media_id) ON DELETE CASCADE,
  FOREIGN KEY (recommender_id) REFERENCES users(user_id) ON DELETE SET NULL
);

CREATE INDEX IF NOT EXISTS idx_recommendations_user
ON recommendations(user_id);
"""

# child tables first (due to foreign keys)
ALL_TABLES = [
    "recommendations",
    "favorites",
    "ratings",
    "user_activities",
    "external_ids",
    "media_tags",
    "media_platforms",
    "media_creators",
    "tags",
    "creators",
    "media_items",
    "platforms",
    "activity_statuses",
    "creator_roles",
    "media_types",
    "users",
]
