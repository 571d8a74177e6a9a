import sqlite3

import pytest

from backend.app.db import Database, _sqlite_path_from_url
from backend.tracker import activities, catalog, favorites, media, ratings, recommendations, users
from backend.tracker.errors import ConflictError
from backend.tracker.seed import SAMPLE_USERS, clear_tables, seed_sample_data


def _type_id(conn, name="Movie"):
    return next(t.type_id for t in catalog.list_media_types(conn) if t.type_name == name)


def _status_id(conn, name="Completed"):
    return next(s.status_id for s in catalog.list_activity_statuses(conn) if s.name == name)


def _make_media(conn, title="Arrival"):
    return media.create_media_item(conn, title=title, type_id=_type_id(conn))


def test_seed_runs_once(db):
    with db.transaction() as conn:
        assert len(catalog.list_media_types(conn)) == 5
        assert len(catalog.list_creator_roles(conn)) == 5
        assert len(catalog.list_activity_statuses(conn)) == 5
        assert [p.name for p in catalog.list_platforms(conn)] == ["Amazon Prime", "Netflix", "Steam"]
        assert len(users.list_users(conn)) == len(SAMPLE_USERS)

        assert seed_sample_data(conn) is False
        assert len(users.list_users(conn)) == len(SAMPLE_USERS)


def test_clear_tables_then_reseed(db):
    with db.transaction() as conn:
        clear_tables(conn)
        assert users.list_users(conn) == []
        assert seed_sample_data(conn) is True
        assert min(t.type_id for t in catalog.list_media_types(conn)) == 1


def test_create_user_assigns_fresh_ids(db):
    with db.transaction() as conn:
        a = users.create_user(conn, "Ada", "ada@example.com")
        b = users.create_user(conn, "Bea", "bea@example.com", "github")

    assert a.user_id and b.user_id
    assert a.user_id != b.user_id

    with db.transaction() as conn:
        assert users.get_user(conn, b.user_id) == b


def test_duplicate_email_is_a_conflict(db):
    with db.transaction() as conn:
        users.create_user(conn, "Ada", "ada@example.com")

    with pytest.raises(ConflictError) as info:
        with db.transaction() as conn:
            users.create_user(conn, "Other Ada", "ada@example.com")
    assert info.value.field == "email"


def test_get_missing_user_is_none(db):
    with db.transaction() as conn:
        assert users.get_user(conn, "does-not-exist") is None


def test_list_users_ordered_by_name(db):
    with db.transaction() as conn:
        users.create_user(conn, "Aaron", "aaron@example.com")
        names = [u.name for u in users.list_users(conn)]
    assert names == sorted(names)
    assert names[0] == "Aaron"


def test_update_user_is_partial(db):
    with db.transaction() as conn:
        user = users.create_user(conn, "Ada", "ada@example.com", "google")
        updated = users.update_user(conn, user.user_id, name="Ada L.")

    assert updated.name == "Ada L."
    assert updated.email == "ada@example.com"
    assert updated.auth_provider == "google"


def test_update_missing_user_is_none(db):
    with db.transaction() as conn:
        assert users.update_user(conn, "nope", name="x") is None


def test_update_to_taken_email_is_a_conflict(db):
    with db.transaction() as conn:
        users.create_user(conn, "Ada", "ada@example.com")
        bea = users.create_user(conn, "Bea", "bea@example.com")

    with pytest.raises(ConflictError):
        with db.transaction() as conn:
            users.update_user(conn, bea.user_id, email="ada@example.com")

    with db.transaction() as conn:
        assert users.get_user(conn, bea.user_id).email == "bea@example.com"


def test_delete_user_reports_whether_a_row_went(db):
    with db.transaction() as conn:
        user = users.create_user(conn, "Ada", "ada@example.com")

    with db.transaction() as conn:
        assert users.delete_user(conn, user.user_id) is True
    with db.transaction() as conn:
        assert users.delete_user(conn, user.user_id) is False
        assert users.get_user(conn, user.user_id) is None
        assert user.user_id not in {u.user_id for u in users.list_users(conn)}


def test_media_listed_by_title(db):
    with db.transaction() as conn:
        _make_media(conn, "Zodiac")
        _make_media(conn, "Alien")
        titles = [m.title for m in media.list_media_items(conn)]
    assert titles == ["Alien", "Zodiac"]


def test_media_requires_known_type(db):
    with pytest.raises(sqlite3.IntegrityError):
        with db.transaction() as conn:
            media.create_media_item(conn, title="Ghost", type_id=999)


def test_rating_resubmission_overwrites(db):
    with db.transaction() as conn:
        user = users.create_user(conn, "Ada", "ada@example.com")
        item = _make_media(conn)
        ratings.upsert_rating(conn, user.user_id, item.media_id, 3.0)
        second = ratings.upsert_rating(conn, user.user_id, item.media_id, 4.5)

    with db.transaction() as conn:
        rows = ratings.list_user_ratings(conn, user.user_id)
    assert rows == [second]
    assert rows[0].score == 4.5


def test_rating_resubmission_refreshes_timestamp(db, monkeypatch):
    with db.transaction() as conn:
        user = users.create_user(conn, "Ada", "ada@example.com")
        item = _make_media(conn)

        monkeypatch.setattr(ratings, "utc_now", lambda: "2020-01-01 00:00:00")
        ratings.upsert_rating(conn, user.user_id, item.media_id, 1.0)
        monkeypatch.setattr(ratings, "utc_now", lambda: "2021-01-01 00:00:00")
        ratings.upsert_rating(conn, user.user_id, item.media_id, 2.0)

    with db.transaction() as conn:
        stored = ratings.get_rating(conn, user.user_id, item.media_id)
    assert stored.score == 2.0
    assert stored.rated_at == "2021-01-01 00:00:00"


def test_rating_summary(db):
    with db.transaction() as conn:
        item = _make_media(conn)
        assert ratings.media_rating_summary(conn, item.media_id).count == 0
        for u in users.list_users(conn)[:2]:
            ratings.upsert_rating(conn, u.user_id, item.media_id, 4.0 if u.name == "Bob Johnson" else 2.0)
        summary = ratings.media_rating_summary(conn, item.media_id)
    assert summary.count == 2
    assert summary.average == pytest.approx(3.0)


def test_rating_for_unknown_media_fails_fk(db):
    with db.transaction() as conn:
        user = users.create_user(conn, "Ada", "ada@example.com")

    with pytest.raises(sqlite3.IntegrityError):
        with db.transaction() as conn:
            ratings.upsert_rating(conn, user.user_id, "missing-media", 1.0)


def test_activities_accumulate(db):
    with db.transaction() as conn:
        user = users.create_user(conn, "Ada", "ada@example.com")
        item = _make_media(conn)
        status = _status_id(conn)
        first = activities.create_activity(conn, user.user_id, item.media_id, status, started_at="2024-01-01")
        second = activities.create_activity(conn, user.user_id, item.media_id, status, started_at="2024-03-01")
        undated = activities.create_activity(conn, user.user_id, item.media_id, status)

    assert len({first.activity_id, second.activity_id, undated.activity_id}) == 3

    with db.transaction() as conn:
        listed = activities.list_user_activities(conn, user.user_id)
        assert activities.get_activity(conn, first.activity_id) == first

    assert [a.activity_id for a in listed] == [second.activity_id, first.activity_id, undated.activity_id]


def test_delete_user_cascades(db):
    with db.transaction() as conn:
        user = users.create_user(conn, "Ada", "ada@example.com")
        item = _make_media(conn)
        ratings.upsert_rating(conn, user.user_id, item.media_id, 5.0)
        activities.create_activity(conn, user.user_id, item.media_id, _status_id(conn))
        favorites.add_favorite(conn, user.user_id, item.media_id)
        recommendations.create_recommendation(conn, user.user_id, item.media_id, source="friend")

    with db.transaction() as conn:
        users.delete_user(conn, user.user_id)

    with db.transaction() as conn:
        assert ratings.get_rating(conn, user.user_id, item.media_id) is None
        assert activities.list_media_activities(conn, item.media_id) == []
        assert favorites.list_favorites(conn, user.user_id) == []
        assert recommendations.list_recommendations(conn, user.user_id) == []
        assert media.get_media_item(conn, item.media_id) is not None


def test_delete_media_cascades_to_links(db):
    with db.transaction() as conn:
        item = _make_media(conn)
        role_id = catalog.list_creator_roles(conn)[0].role_id
        creator = catalog.create_creator(conn, "Denis Villeneuve", role_id)
        tag = catalog.create_tag(conn, "sci-fi", "genre")
        platform = catalog.list_platforms(conn)[0]
        catalog.link_creator(conn, item.media_id, creator.creator_id)
        catalog.tag_media(conn, item.media_id, tag.tag_id)
        catalog.add_media_platform(conn, item.media_id, platform.platform_id, "tt2543164")
        catalog.set_external_id(conn, item.media_id, platform.platform_id, "tt2543164")

    with db.transaction() as conn:
        assert media.delete_media_item(conn, item.media_id) is True

    with db.transaction() as conn:
        assert catalog.list_media_creators(conn, item.media_id) == []
        assert catalog.list_media_tags(conn, item.media_id) == []
        assert catalog.list_media_platforms(conn, item.media_id) == []
        assert catalog.list_external_ids(conn, item.media_id) == []
        # the creator and tag themselves survive
        assert [c.name for c in catalog.list_creators(conn)] == ["Denis Villeneuve"]
        assert [t.name for t in catalog.list_tags(conn)] == ["sci-fi"]


def test_delete_media_cascades_to_engagement(db):
    with db.transaction() as conn:
        user = users.create_user(conn, "Ada", "ada@example.com")
        item = _make_media(conn)
        ratings.upsert_rating(conn, user.user_id, item.media_id, 4.0)
        activities.create_activity(conn, user.user_id, item.media_id, _status_id(conn))
        favorites.add_favorite(conn, user.user_id, item.media_id)
        recommendations.create_recommendation(conn, user.user_id, item.media_id, score=0.5)

    with db.transaction() as conn:
        assert media.delete_media_item(conn, item.media_id) is True

    with db.transaction() as conn:
        assert ratings.get_rating(conn, user.user_id, item.media_id) is None
        assert ratings.media_rating_summary(conn, item.media_id).count == 0
        assert activities.list_media_activities(conn, item.media_id) == []
        assert activities.list_user_activities(conn, user.user_id) == []
        assert favorites.list_favorites(conn, user.user_id) == []
        assert recommendations.list_recommendations(conn, user.user_id) == []
        # the user is untouched
        assert users.get_user(conn, user.user_id) is not None


def test_links_are_idempotent(db):
    with db.transaction() as conn:
        item = _make_media(conn)
        tag = catalog.create_tag(conn, "cozy", "mood")
        catalog.tag_media(conn, item.media_id, tag.tag_id)
        catalog.tag_media(conn, item.media_id, tag.tag_id)
        platform = catalog.list_platforms(conn)[0]
        catalog.set_external_id(conn, item.media_id, platform.platform_id, "old")
        catalog.set_external_id(conn, item.media_id, platform.platform_id, "new")

        assert len(catalog.list_media_tags(conn, item.media_id)) == 1
        assert [e.external_id for e in catalog.list_external_ids(conn, item.media_id)] == ["new"]


def test_favorite_keeps_first_timestamp(db):
    with db.transaction() as conn:
        user = users.list_users(conn)[0]
        item = _make_media(conn)
        first = favorites.add_favorite(conn, user.user_id, item.media_id)
        again = favorites.add_favorite(conn, user.user_id, item.media_id)
        assert again.added_at == first.added_at
        assert len(favorites.list_favorites(conn, user.user_id)) == 1
        assert favorites.remove_favorite(conn, user.user_id, item.media_id) is True
        assert favorites.remove_favorite(conn, user.user_id, item.media_id) is False


def test_recommendations_highest_score_first(db):
    with db.transaction() as conn:
        alice, bob = users.list_users(conn)[:2]
        a = _make_media(conn, "A")
        b = _make_media(conn, "B")
        c = _make_media(conn, "C")
        recommendations.create_recommendation(conn, alice.user_id, a.media_id, score=0.2)
        recommendations.create_recommendation(conn, alice.user_id, b.media_id)
        recommendations.create_recommendation(conn, alice.user_id, c.media_id, recommender_id=bob.user_id, score=0.9)

        recs = recommendations.list_recommendations(conn, alice.user_id)

    assert [r.media_id for r in recs] == [c.media_id, a.media_id, b.media_id]
    assert recs[0].recommender_id == bob.user_id


def test_recommender_deletion_nulls_attribution(db):
    with db.transaction() as conn:
        alice = users.create_user(conn, "Alice", "alice@example.com")
        bob = users.create_user(conn, "Bob", "bob@example.com")
        item = _make_media(conn)
        rec = recommendations.create_recommendation(conn, alice.user_id, item.media_id, recommender_id=bob.user_id)

    with db.transaction() as conn:
        users.delete_user(conn, bob.user_id)

    with db.transaction() as conn:
        (kept,) = recommendations.list_recommendations(conn, alice.user_id)
    assert kept.recommendation_id == rec.recommendation_id
    assert kept.recommender_id is None


def test_transaction_rolls_back_on_error(db):
    with pytest.raises(RuntimeError):
        with db.transaction() as conn:
            users.create_user(conn, "Ghost", "ghost@example.com")
            raise RuntimeError("boom")

    with db.transaction() as conn:
        assert "ghost@example.com" not in {u.email for u in users.list_users(conn)}


def test_closed_database_refuses_work(tmp_path):
    database = Database(str(tmp_path / "nested" / "dir" / "tracker.db"))
    database.open()
    assert (tmp_path / "nested" / "dir" / "tracker.db").exists()
    database.close()

    with pytest.raises(RuntimeError):
        with database.transaction():
            pass


@pytest.mark.parametrize(
    "url, expected",
    [
        ("sqlite:///./data/app.db", "./data/app.db"),
        ("sqlite:///../data/app.db", "../data/app.db"),
        ("sqlite:///data/app.db", "data/app.db"),
        ("sqlite:////var/lib/tracker/app.db", "/var/lib/tracker/app.db"),
    ],
)
def test_sqlite_path_from_url(url, expected):
    assert _sqlite_path_from_url(url) == expected


def test_non_sqlite_url_is_rejected():
    with pytest.raises(ValueError):
        _sqlite_path_from_url("postgresql://localhost/tracker")
