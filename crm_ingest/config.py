"""
crm_ingest/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

VALIDATION_MODES = ("strict", "lenient")

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_mode_env(name: str, default: str) -> str:
    mode = _get_str_env(name, default).lower()
    if mode not in VALIDATION_MODES:
        raise RuntimeError(
            f"{name}='{mode}' is not valid. Allowed values: {list(VALIDATION_MODES)}."
        )
    return mode


@dataclass(frozen=True)
class ImportSettings:
    """
    Runtime settings for CSV import.
    """

    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    default_validation_mode: str = "strict"
    max_validation_errors: int = 500
    log_validation_errors: bool = True


@lru_cache(maxsize=1)
def get_import_settings() -> ImportSettings:
    """
    Return cached CSV import settings from environment variables.

    Raises RuntimeError if CRM_IMPORT_DEFAULT_MODE is not a known mode.
    """

    return ImportSettings(
        max_upload_bytes=max(1, _get_int_env("CRM_IMPORT_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
        default_validation_mode=_get_mode_env("CRM_IMPORT_DEFAULT_MODE", "strict"),
        max_validation_errors=max(1, _get_int_env("CRM_IMPORT_MAX_VALIDATION_ERRORS", 500)),
        log_validation_errors=_get_bool_env("CRM_IMPORT_LOG_VALIDATION_ERRORS", True),
    )


def get_log_level() -> str:
    """
    Return the configured root log level name.
    """

    return _get_str_env("LOG_LEVEL", "INFO").upper()
