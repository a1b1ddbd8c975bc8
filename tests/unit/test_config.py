import dataclasses

import pytest

from club_console.app.config import DEFAULT_BASE_URL, AppConfig

_VARS = (
    "CLUB_API_BASE_URL",
    "CLUB_ACCESS_TOKEN",
    "CLUB_TIMEOUT_SECONDS",
    "CLUB_VERIFY_SSL",
    "CLUB_RETRY_MAX_ATTEMPTS",
    "CLUB_RETRY_BACKOFF_MS",
    "CLUB_PAGE_SIZE",
    "CLUB_SEARCH_DEBOUNCE_MS",
    "CLUB_CACHE_TTL_SECONDS",
    "CLUB_EXPORT_LIMIT",
    "CLUB_BULK_CONCURRENCY",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    # set then delete so monkeypatch also removes whatever load_dotenv adds
    for name in _VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


def test_defaults_when_env_is_empty(tmp_path) -> None:
    config = AppConfig.from_env(env_file=str(tmp_path / "missing.env"))

    assert config.base_url == DEFAULT_BASE_URL
    assert config.timeout_seconds == 20
    assert config.verify_ssl is True
    assert config.retry_max_attempts == 3
    assert config.retry_backoff_ms == 150
    assert config.page_size == 10
    assert config.search_debounce_ms == 300
    assert config.export_limit == 1000
    assert config.bulk_concurrency == 5
    assert config.access_token is None


def test_values_are_read_from_env_file(tmp_path) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "CLUB_API_BASE_URL=https://club.example.org\n"
        "CLUB_ACCESS_TOKEN= secret-token \n"
        "CLUB_VERIFY_SSL=false\n"
        "CLUB_PAGE_SIZE=25\n"
        "CLUB_SEARCH_DEBOUNCE_MS=150\n"
        "CLUB_EXPORT_LIMIT=500\n",
        encoding="utf-8",
    )

    config = AppConfig.from_env(env_file=str(env_file))

    assert config.base_url == "https://club.example.org"
    assert config.access_token == "secret-token"
    assert config.verify_ssl is False
    assert config.page_size == 25
    assert config.search_debounce_ms == 150
    assert config.export_limit == 500


def test_process_env_wins_over_env_file(tmp_path, monkeypatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text("CLUB_PAGE_SIZE=25\n", encoding="utf-8")
    monkeypatch.setenv("CLUB_PAGE_SIZE", "40")

    assert AppConfig.from_env(env_file=str(env_file)).page_size == 40


@pytest.mark.parametrize(
    ("field", "value", "message"),
    [
        ("base_url", "", "CLUB_API_BASE_URL"),
        ("timeout_seconds", 0, "CLUB_TIMEOUT_SECONDS"),
        ("retry_max_attempts", 0, "CLUB_RETRY_MAX_ATTEMPTS"),
        ("page_size", 0, "CLUB_PAGE_SIZE"),
        ("search_debounce_ms", -1, "CLUB_SEARCH_DEBOUNCE_MS"),
        ("bulk_concurrency", 0, "CLUB_BULK_CONCURRENCY"),
    ],
)
def test_validate_rejects_invalid_values(field, value, message) -> None:
    config = AppConfig(
        base_url=DEFAULT_BASE_URL,
        timeout_seconds=20,
        verify_ssl=True,
        retry_max_attempts=3,
        retry_backoff_ms=150,
    )

    with pytest.raises(ValueError, match=message):
        dataclasses.replace(config, **{field: value}).validate()
