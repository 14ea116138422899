"""Tests for the health endpoint and application settings."""

import pytest
from pydantic import ValidationError

from xtermux.database.config.config import DEV_SECRET_KEY, MIN_SECRET_KEY_LENGTH, Settings


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": True, "ai_configured": True}


def test_database_url_for_sqlite(tmp_path):
    settings = Settings(DB_DRIVER_NAME="sqlite", DB_DATABASE_NAME=str(tmp_path / "x.db"))
    assert settings.database_url.render_as_string() == f"sqlite:///{tmp_path / 'x.db'}"


def test_database_url_for_server_database():
    settings = Settings(
        DB_DRIVER_NAME="postgresql+psycopg",
        DB_USERNAME="xt",
        DB_PASSWORD="pw",
        DB_HOST="db",
        DB_DATABASE_NAME="xtermux",
    )
    assert settings.database_url.render_as_string(hide_password=False) == "postgresql+psycopg://xt:pw@db/xtermux"


def test_ai_configured_flag():
    assert Settings(AI_INTEGRATIONS_OPENAI_API_KEY="").ai_configured is False
    assert Settings(AI_INTEGRATIONS_OPENAI_API_KEY="sk-test").ai_configured is True


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("root@xtermux.dev", ["root@xtermux.dev"]),
        ("root@xtermux.dev, ops@xtermux.dev,", ["root@xtermux.dev", "ops@xtermux.dev"]),
        ('["root@xtermux.dev", "ops@xtermux.dev"]', ["root@xtermux.dev", "ops@xtermux.dev"]),
        ("", []),
    ],
)
def test_admin_emails_from_environment(monkeypatch, raw, expected):
    monkeypatch.setenv("ADMIN_EMAILS", raw)
    assert Settings().ADMIN_EMAILS == expected


def test_prod_mode_refuses_default_secret_key():
    with pytest.raises(ValidationError, match="SECRET_KEY"):
        Settings(INIT_MODE="prod")


def test_prod_mode_refuses_short_secret_key():
    with pytest.raises(ValidationError, match="SECRET_KEY"):
        Settings(INIT_MODE="prod", SECRET_KEY="too-short")


def test_prod_mode_accepts_strong_secret_key():
    settings = Settings(INIT_MODE="prod", SECRET_KEY="k" * MIN_SECRET_KEY_LENGTH)
    assert settings.SECRET_KEY == "k" * MIN_SECRET_KEY_LENGTH


def test_dev_default_secret_key_is_long_enough_for_hs256():
    assert Settings(INIT_MODE="dev").SECRET_KEY == DEV_SECRET_KEY
    assert len(DEV_SECRET_KEY.encode()) >= MIN_SECRET_KEY_LENGTH
