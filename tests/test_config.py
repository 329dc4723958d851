"""Tests for shared configuration helpers."""

from shared import config


def test_cors_allow_origins_defaults_in_dev(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "dev")
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)

    assert config.cors_allow_origins() == ["http://localhost:5173", "http://127.0.0.1:5173"]


def test_cors_allow_origins_parses_comma_separated_list(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.com, https://b.com")

    assert config.cors_allow_origins() == ["https://a.com", "https://b.com"]


def test_cors_allow_origins_uses_ui_origin_in_prod(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)
    monkeypatch.setenv("UI_ORIGIN", "https://merchants-ui.example.com")

    assert config.cors_allow_origins() == ["https://merchants-ui.example.com"]


def test_cors_allow_origins_warns_and_defaults_to_empty_in_prod(monkeypatch, caplog) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)
    monkeypatch.delenv("UI_ORIGIN", raising=False)

    assert config.cors_allow_origins() == []
    assert "cors_allow_origins_empty_in_prod" in caplog.text


def test_seed_demo_data_defaults_on_in_dev_and_off_in_prod(monkeypatch) -> None:
    monkeypatch.delenv("SEED_DEMO_DATA", raising=False)

    monkeypatch.setenv("APP_ENV", "dev")
    assert config.seed_demo_data() is True

    monkeypatch.setenv("APP_ENV", "prod")
    assert config.seed_demo_data() is False


def test_seed_demo_data_explicit_values_override_environment(monkeypatch) -> None:
    monkeypatch.setenv("APP_ENV", "prod")
    monkeypatch.setenv("SEED_DEMO_DATA", "true")
    assert config.seed_demo_data() is True

    monkeypatch.setenv("APP_ENV", "dev")
    monkeypatch.setenv("SEED_DEMO_DATA", "0")
    assert config.seed_demo_data() is False


def test_max_page_size_uses_default_when_missing(monkeypatch) -> None:
    monkeypatch.delenv("MAX_PAGE_SIZE", raising=False)

    assert config.max_page_size() == 100


def test_max_page_size_uses_default_on_invalid(monkeypatch, caplog) -> None:
    monkeypatch.setenv("MAX_PAGE_SIZE", "lots")

    assert config.max_page_size() == 100
    assert "invalid_int_env" in caplog.text


def test_merchant_create_max_attempts_rejects_non_positive(monkeypatch) -> None:
    monkeypatch.setenv("MERCHANT_CREATE_MAX_ATTEMPTS", "0")

    assert config.merchant_create_max_attempts() == 3

    monkeypatch.setenv("MERCHANT_CREATE_MAX_ATTEMPTS", "5")
    assert config.merchant_create_max_attempts() == 5
