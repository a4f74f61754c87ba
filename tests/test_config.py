import pytest

from mystery_feed.config import Settings, get_settings


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for name in ("PORT", "SOURCE_FEED_URL", "PUBLISHED_URL", "CACHE_MAX_AGE_SECONDS", "FETCH_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.PORT == 3000
    assert settings.SOURCE_FEED_URL == "https://feeds.simplecast.com/hNaFxXpO"
    assert settings.CACHE_MAX_AGE_SECONDS == 3600
    assert settings.FEED_TTL_MINUTES == 60
    assert settings.FETCH_TIMEOUT_SECONDS == 10
    assert settings.FETCH_MAX_RETRIES == 1


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("source_feed_url", "https://feeds.example.com/other")

    settings = Settings(_env_file=None)

    assert settings.PORT == 8080
    assert settings.SOURCE_FEED_URL == "https://feeds.example.com/other"


def test_invalid_value_is_rejected(monkeypatch):
    monkeypatch.setenv("FETCH_TIMEOUT_SECONDS", "0")

    with pytest.raises(ValueError):
        Settings(_env_file=None)


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
