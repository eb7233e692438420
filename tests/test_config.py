from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from app import create_app
from config import Settings


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    settings = Settings.from_env({})
    assert settings.database_url is None
    assert settings.password is None
    assert settings.port == 8000
    assert settings.views_dir == tmp_path / "views"
    assert settings.public_dir == tmp_path / "public"
    assert settings.create_schema is False
    assert settings.log_level == "INFO"


def test_from_env():
    settings = Settings.from_env(
        {
            "DATABASE_URL": "postgresql://u:p@db/tasks",
            "PASSWORD": " spaced ",
            "PORT": "7777",
            "VIEWS_DIR": "/srv/views",
            "CREATE_SCHEMA": "yes",
            "LOG_LEVEL": "debug",
        }
    )
    assert settings.database_url == "postgresql://u:p@db/tasks"
    # compared byte-exact, so never stripped
    assert settings.password == " spaced "
    assert settings.port == 7777
    assert settings.views_dir == Path("/srv/views")
    assert settings.create_schema is True
    assert settings.log_level == "DEBUG"


def test_bad_port():
    with pytest.raises(RuntimeError):
        Settings.from_env({"PORT": "eighty"})


def test_app_finds_views_and_public_in_working_directory(tmp_path, monkeypatch):
    (tmp_path / "views").mkdir()
    (tmp_path / "views" / "login.html").write_text("<form>from cwd</form>")
    (tmp_path / "public").mkdir()
    monkeypatch.chdir(tmp_path)

    settings = Settings.from_env({"DATABASE_URL": f"sqlite:///{tmp_path / 'tasks.sqlite3'}"})
    assert settings.views_dir == tmp_path / "views"
    assert settings.public_dir == tmp_path / "public"

    client = TestClient(create_app(settings))
    assert "from cwd" in client.get("/login").text
