import pytest
from pydantic import ValidationError

from bookstore.config.settings import DATABASE_HOST, DATABASE_PORT, Settings

from ..conftest import make_test_settings


def test_database_url_uses_fixed_host_and_port():
    url = make_test_settings().DATABASE_URL

    assert url.drivername == "postgresql+psycopg"
    assert url.host == DATABASE_HOST == "db"
    assert url.port == DATABASE_PORT == 5432
    assert url.username == "bookstore"
    assert url.database == "books"


def test_database_url_escapes_password():
    url = make_test_settings(POSTGRES_PASSWORD="p@ss:w/rd").DATABASE_URL

    assert url.password == "p@ss:w/rd"
    assert "p%40ss%3Aw%2Frd" in url.render_as_string(hide_password=False)
    assert "p@ss" not in url.render_as_string(hide_password=True)


def test_credentials_are_read_from_environment(monkeypatch):
    monkeypatch.setenv("POSTGRES_USER", "env_user")
    monkeypatch.setenv("POSTGRES_PASSWORD", "env_pw")
    monkeypatch.setenv("POSTGRES_DB", "env_db")

    settings = Settings(_env_file=None)

    assert settings.DATABASE_URL.username == "env_user"
    assert settings.DATABASE_URL.database == "env_db"


def test_missing_credentials_fail(monkeypatch):
    for name in ("POSTGRES_USER", "POSTGRES_PASSWORD", "POSTGRES_DB"):
        monkeypatch.delenv(name, raising=False)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_defaults():
    settings = make_test_settings()

    assert settings.SERVER_PORT == 8080
    assert settings.SHUTDOWN_GRACE_SECONDS == 5
    assert settings.POSTGRES_DRIVER == "psycopg"


@pytest.mark.parametrize("raw, expected", [("debug", "DEBUG"), (" Warning ", "WARNING")])
def test_log_level_is_normalized(raw, expected):
    assert make_test_settings(LOG_LEVEL=raw).LOG_LEVEL == expected


def test_log_format_is_normalized():
    assert make_test_settings(LOG_FORMAT="JSON").LOG_FORMAT == "json"


def test_unknown_log_format_rejected():
    with pytest.raises(ValidationError):
        make_test_settings(LOG_FORMAT="xml")
