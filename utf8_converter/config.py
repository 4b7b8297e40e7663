from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

# utf8_converter/config.py -> project root .env
ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
# utf-8-sig so a BOM-prefixed .env does not corrupt the first key.
load_dotenv(ENV_PATH, encoding="utf-8-sig")

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def _get_env(name: str, default: str = "") -> str:
    value = os.getenv(name)
    if value is not None:
        return str(value)
    bom_value = os.getenv(f"\ufeff{name}")
    if bom_value is not None:
        return str(bom_value)
    return default


def _env_str(name: str, default: str) -> str:
    return _get_env(name, default).strip() or default


def _env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, "")
    if not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = _get_env(name, "")
    if not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = _get_env(name, "")
    items = [item.strip() for item in raw.split(",") if item.strip()]
    return items or list(default)


@dataclass(frozen=True)
class Settings:
    allowed_extension: str = ".sql"
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    decode_errors: str = "replace"
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    debug_detection: bool = False


def load_settings() -> Settings:
    decode_errors = _env_str("CONVERTER_DECODE_ERRORS", "replace").lower()
    if decode_errors not in {"replace", "strict"}:
        decode_errors = "replace"
    return Settings(
        allowed_extension=_env_str("CONVERTER_ALLOWED_EXTENSION", ".sql"),
        max_upload_bytes=max(1, _env_int("CONVERTER_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
        decode_errors=decode_errors,
        log_level=_env_str("CONVERTER_LOG_LEVEL", "INFO").upper(),
        cors_origins=_env_list("CONVERTER_CORS_ORIGINS", ["*"]),
        debug_detection=_env_bool("CONVERTER_DEBUG_DETECTION", False),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
