"""Settings — environment parsing tests."""

from rpcgate.config import Settings


def test_postgres_url_gets_async_driver(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@host:5432/app")
    assert Settings().database_url == "postgresql+asyncpg://u:p@host:5432/app"


def test_other_urls_unchanged(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    assert Settings().database_url == "sqlite+aiosqlite:///:memory:"


def test_session_cookie_name_from_env(monkeypatch):
    monkeypatch.setenv("SESSION_COOKIE_NAME", "__Secure-session-token")
    assert Settings().session_cookie_name == "__Secure-session-token"
