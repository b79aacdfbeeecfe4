from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _resolve_project_root() -> Path:
    return Path(__file__).resolve().parents[1]


PROJECT_ROOT = _resolve_project_root()


def load_env() -> None:
    env_name = os.getenv("APP_ENV", "development")
    candidates = [Path.cwd(), PROJECT_ROOT]
    for base in candidates:
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            break

    for base in candidates:
        env_specific = base / f".env.{env_name}"
        if env_specific.exists():
            load_dotenv(env_specific, override=True)
            break


@dataclass(frozen=True)
class Settings:
    database_url: str
    log_level: str = "INFO"
    log_dir: str = "logs"
    time_zone: str | None = None
    first_weekday: int = 0
    preview_limit: int = 5


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from exc


def load_settings() -> Settings:
    load_env()

    first_weekday = _int_env("FIRST_WEEKDAY", 0)
    if not 0 <= first_weekday <= 6:
        raise RuntimeError(f"FIRST_WEEKDAY must be between 0 (Monday) and 6 (Sunday), got {first_weekday}")

    preview_limit = _int_env("PREVIEW_LIMIT", 5)
    if preview_limit < 1:
        raise RuntimeError(f"PREVIEW_LIMIT must be positive, got {preview_limit}")

    return Settings(
        database_url=os.getenv("DATABASE_URL", "").strip() or "sqlite:///recurrence.db",
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_dir=os.getenv("LOG_DIR", "logs"),
        time_zone=os.getenv("TIME_ZONE", "").strip() or None,
        first_weekday=first_weekday,
        preview_limit=preview_limit,
    )


SETTINGS = load_settings()
