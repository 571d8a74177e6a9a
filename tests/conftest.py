import pytest
from fastapi.testclient import TestClient

from backend.app.config import settings
from backend.app.db import Database
from backend.app.main import app
from backend.tracker.seed import seed_sample_data


@pytest.fixture
def db(tmp_path):
    database = Database(str(tmp_path / "tracker.db"))
    database.open()
    with database.transaction() as conn:
        seed_sample_data(conn)
    yield database
    database.close()


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "database_url", f"sqlite:///{tmp_path}/app.db")
    with TestClient(app) as c:
        yield c


@pytest.fixture
def movie_type_id(client):
    types = client.get("/media-types").json()
    return next(t["type_id"] for t in types if t["type_name"] == "Movie")


@pytest.fixture
def completed_status_id(client):
    statuses = client.get("/activity-statuses").json()
    return next(s["status_id"] for s in statuses if s["name"] == "Completed")
