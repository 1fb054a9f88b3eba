# src/todo_client/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Settings are built lazily, so tests can inject their own object instead.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

ENV_PREFIX = "TODO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Remote API ----
    api_base_url: str
    http_timeout_seconds: float  # 0 => wait forever

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    token_store_path: Path

    # ---- Tasks ----
    tasks_page_size: int

    # ---- Federated login ----
    google_client_id: Optional[str]
    google_scopes: List[str]

    # ---- Front end ----
    console_enabled: bool

    @property
    def http_timeout(self) -> float | None:
        """Timeout value for httpx (None disables timeouts entirely)."""
        return self.http_timeout_seconds if self.http_timeout_seconds > 0 else None

    @staticmethod
    def from_env() -> "Settings":
        load_dotenv(override=False)

        app_name = _env(_k("APP_NAME"), "todo").strip() or "todo"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        api_base_url = _env(_k("API_BASE_URL"), "http://localhost:8000").strip().rstrip("/")
        http_timeout_seconds = max(0.0, _env_float(_k("HTTP_TIMEOUT_SECONDS"), 0.0))

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo"))
        token_store_path = _env_path(_k("TOKEN_STORE_PATH"), data_dir / "auth.json")

        tasks_page_size = _env_int(_k("TASKS_PAGE_SIZE"), 100)
        if tasks_page_size <= 0:
            tasks_page_size = 100

        google_client_id = _env(_k("GOOGLE_CLIENT_ID"), "").strip() or None
        google_scopes = _env_list(_k("GOOGLE_SCOPES"), ["profile", "email"])

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            api_base_url=api_base_url,
            http_timeout_seconds=http_timeout_seconds,
            data_dir=data_dir,
            token_store_path=token_store_path,
            tasks_page_size=tasks_page_size,
            google_client_id=google_client_id,
            google_scopes=google_scopes,
            console_enabled=console_enabled,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
