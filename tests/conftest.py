from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event

from app import create_app
from config import Settings
from db import init_db

PASSWORD = "correct horse"
ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def settings(tmp_path):
    """A fresh SQLite file per test"""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'tasks.sqlite3'}",
        password=PASSWORD,
        views_dir=ROOT / "views",
        public_dir=ROOT / "public",
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    init_db(app.state.engine)
    return app


@pytest.fixture
def engine(app):
    return app.state.engine


@pytest.fixture
def connections(engine):
    """Count connections handed out and given back from here on"""
    counts = {"checkout": 0, "checkin": 0}

    def on_checkout(*args):
        counts["checkout"] += 1

    def on_checkin(*args):
        counts["checkin"] += 1

    event.listen(engine, "checkout", on_checkout)
    event.listen(engine, "checkin", on_checkin)
    yield counts
    event.remove(engine, "checkout", on_checkout)
    event.remove(engine, "checkin", on_checkin)


@pytest.fixture
def client(app):
    # The session cookie is Secure, so talk https or the jar drops it
    return TestClient(app, base_url="https://testserver")


@pytest.fixture
def auth_client(client):
    r = client.post("/login", data={"password": PASSWORD}, follow_redirects=False)
    assert r.status_code == 303
    return client
