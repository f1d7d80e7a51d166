"""Settings — environment parsing and URL normalization."""

from learning_contracts.config import Settings


def test_plain_postgres_url_gets_async_driver():
    settings = Settings(database_url="postgresql://u:p@host:5432/contracts")
    assert settings.database_url == "postgresql+asyncpg://u:p@host:5432/contracts"


def test_sqlite_url_left_alone():
    settings = Settings(database_url="sqlite+aiosqlite:///local.db")
    assert settings.database_url == "sqlite+aiosqlite:///local.db"


def test_page_sizes_read_from_environment(monkeypatch):
    monkeypatch.setenv("DEFAULT_PAGE_SIZE", "10")
    monkeypatch.setenv("MAX_PAGE_SIZE", "25")
    settings = Settings()
    assert settings.default_page_size == 10
    assert settings.max_page_size == 25
