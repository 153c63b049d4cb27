from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv


PROJECT_ROOT = Path(__file__).resolve().parent.parent
ENV_FILE = PROJECT_ROOT / ".env"
load_dotenv(ENV_FILE, override=False)

DEFAULT_GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


def _as_bool(value: str | None, *, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(
    value: str | None,
    *,
    default: int,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    if value is None or not value.strip():
        parsed = default
    else:
        try:
            parsed = int(value.strip())
        except ValueError as exc:
            raise ValueError(f"Expected integer value, got: {value!r}") from exc

    if min_value is not None and parsed < min_value:
        raise ValueError(f"Integer value {parsed} is less than allowed minimum {min_value}.")
    if max_value is not None and parsed > max_value:
        raise ValueError(f"Integer value {parsed} exceeds allowed maximum {max_value}.")
    return parsed


def _as_float(
    value: str | None,
    *,
    default: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    if value is None or not value.strip():
        parsed = default
    else:
        try:
            parsed = float(value.strip())
        except ValueError as exc:
            raise ValueError(f"Expected numeric value, got: {value!r}") from exc

    if min_value is not None and parsed < min_value:
        raise ValueError(f"Value {parsed} is less than allowed minimum {min_value}.")
    if max_value is not None and parsed > max_value:
        raise ValueError(f"Value {parsed} exceeds allowed maximum {max_value}.")
    return parsed


def _as_list(value: str | None, *, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


def _first_non_empty(*values: str | None) -> str:
    for item in values:
        if item and item.strip():
            return item.strip()
    return ""


@dataclass(frozen=True)
class Settings:
    app_name: str
    environment: str
    debug: bool
    port: int
    log_level: str

    gemini_api_key: str
    gemini_api_base: str
    gemini_monograph_model: str
    gemini_image_model: str
    gemini_dose_model: str
    gemini_temperature: float
    gemini_timeout_seconds: float

    search_session_ttl_seconds: int
    cors_origins: list[str]


def _validate_for_production(settings: Settings) -> None:
    if settings.environment != "production":
        return

    missing: list[str] = []
    if not settings.gemini_api_key:
        missing.append("GEMINI_API_KEY")
    if missing:
        raise RuntimeError(
            "Missing required environment variables for production: " + ", ".join(missing)
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    environment = (os.getenv("APP_ENV") or "development").strip().lower()
    settings = Settings(
        app_name=(os.getenv("APP_NAME") or "MedicoWeb").strip(),
        environment=environment,
        debug=_as_bool(os.getenv("DEBUG"), default=environment != "production"),
        port=_as_int(os.getenv("PORT"), default=8000, min_value=1, max_value=65535),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
        gemini_api_key=_first_non_empty(os.getenv("GEMINI_API_KEY"), os.getenv("API_KEY")),
        gemini_api_base=(os.getenv("GEMINI_API_BASE") or DEFAULT_GEMINI_API_BASE).strip().rstrip("/"),
        gemini_monograph_model=(os.getenv("GEMINI_MONOGRAPH_MODEL") or "gemini-3-pro-preview").strip(),
        gemini_image_model=(os.getenv("GEMINI_IMAGE_MODEL") or "gemini-2.5-flash-image").strip(),
        gemini_dose_model=(os.getenv("GEMINI_DOSE_MODEL") or "gemini-2.5-flash").strip(),
        gemini_temperature=_as_float(
            os.getenv("GEMINI_TEMPERATURE"), default=0.2, min_value=0.0, max_value=2.0
        ),
        gemini_timeout_seconds=_as_float(
            os.getenv("GEMINI_TIMEOUT_SECONDS"), default=120.0, min_value=1.0, max_value=3600.0
        ),
        search_session_ttl_seconds=_as_int(
            os.getenv("SEARCH_SESSION_TTL_SECONDS"),
            default=60 * 60,
            min_value=60,
            max_value=60 * 60 * 24 * 7,
        ),
        cors_origins=_as_list(
            os.getenv("CORS_ORIGINS"),
            default=[
                "http://localhost:3000",
                "http://127.0.0.1:3000",
                "http://localhost:5173",
                "http://127.0.0.1:5173",
            ],
        ),
    )

    _validate_for_production(settings)
    return settings
