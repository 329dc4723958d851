"""Configuration helpers for environment variables."""

from __future__ import annotations

import os
import logging

from dotenv import load_dotenv


logger = logging.getLogger(__name__)


_TRUE_VALUES = {"1", "true"}
_FALSE_VALUES = {"0", "false"}
_DEFAULT_MAX_PAGE_SIZE = 100
_DEFAULT_MERCHANT_CREATE_MAX_ATTEMPTS = 3


def _should_load_dotenv() -> bool:
    """Return whether local dotenv loading should run."""
    app_env = os.getenv("APP_ENV", "dev").strip().lower()
    return app_env in {"dev", "local"}


if _should_load_dotenv():
    load_dotenv()


def get_env(name: str, default: str | None = None) -> str | None:
    """Return a raw environment value or default."""
    return os.getenv(name, default)


def _get_positive_int(name: str, default: int) -> int:
    raw_value = (get_env(name, "") or "").strip()
    if not raw_value:
        return default
    try:
        value = int(raw_value)
    except ValueError:
        logger.warning("invalid_int_env name=%s value=%s; using default=%s", name, raw_value, default)
        return default
    if value < 1:
        logger.warning("non_positive_int_env name=%s value=%s; using default=%s", name, value, default)
        return default
    return value


def app_env() -> str:
    """Return the current application environment."""
    return (get_env("APP_ENV", "dev") or "dev").strip() or "dev"


def _is_local_env() -> bool:
    return app_env().strip().lower() in {"dev", "local"}


def cors_allow_origins() -> list[str]:
    """Return CORS allowed origins from env with safe environment defaults."""
    raw_origins = get_env("CORS_ALLOW_ORIGINS", "") or ""
    parsed_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]

    if parsed_origins:
        return parsed_origins

    if _is_local_env():
        return ["http://localhost:5173", "http://127.0.0.1:5173"]

    ui_origin = (get_env("UI_ORIGIN", "") or "").strip()
    if ui_origin:
        return [ui_origin]

    logger.warning(
        "cors_allow_origins_empty_in_prod app_env=%s; define CORS_ALLOW_ORIGINS or UI_ORIGIN",
        app_env(),
    )

    return []


def seed_demo_data() -> bool:
    """Return whether in-memory stores are seeded with demo merchants and transactions."""
    raw_value = (get_env("SEED_DEMO_DATA", "") or "").strip().lower()
    if raw_value in _TRUE_VALUES:
        return True
    if raw_value in _FALSE_VALUES:
        return False
    return _is_local_env()


def max_page_size() -> int:
    """Return the upper bound accepted for listing page sizes."""
    return _get_positive_int("MAX_PAGE_SIZE", _DEFAULT_MAX_PAGE_SIZE)


def merchant_create_max_attempts() -> int:
    """Return how many times merchant creation retries after an id collision."""
    return _get_positive_int("MERCHANT_CREATE_MAX_ATTEMPTS", _DEFAULT_MERCHANT_CREATE_MAX_ATTEMPTS)


def supabase_url() -> str | None:
    """Return Supabase URL when configured."""
    return get_env("SUPABASE_URL")


def supabase_service_role_key() -> str | None:
    """Return Supabase service role key when configured."""
    return get_env("SUPABASE_SERVICE_ROLE_KEY")
