from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

APP_DIR_NAME = "codeforces-reminder"


@dataclass(frozen=True)
class Settings:
    telegram_bot_token: str
    telegram_chat_id: int
    contest_state_path: Path
    error_log_path: Path
    error_log_max_lines: int
    reminder_lead_minutes: int
    codeforces_api_url: str
    http_timeout_seconds: float


def _required_env(name: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        raise ValueError(f"Missing required environment variable: {name}")
    return value.strip()


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def default_data_dir() -> Path:
    override = os.getenv("CONTEST_REMINDER_DATA_DIR")
    if override:
        return Path(override)

    xdg_data_home = os.getenv("XDG_DATA_HOME")
    base = Path(xdg_data_home) if xdg_data_home else Path.home() / ".local" / "share"
    return base / APP_DIR_NAME


def error_log_path() -> Path:
    return Path(os.getenv("ERROR_LOG_PATH", default_data_dir() / "error_log.txt"))


def load_settings() -> Settings:
    data_dir = default_data_dir()

    token = _required_env("TELEGRAM_BOT_TOKEN")
    chat_id = int(_required_env("TELEGRAM_CHAT_ID"))

    contest_state_path = Path(os.getenv("CONTEST_STATE_PATH", data_dir / "contests.json"))

    max_lines = _int_env("ERROR_LOG_MAX_LINES", 2000)
    if max_lines < 1:
        raise ValueError("ERROR_LOG_MAX_LINES must be positive")

    lead_minutes = _int_env("REMINDER_LEAD_MINUTES", 30)
    if lead_minutes < 0:
        raise ValueError("REMINDER_LEAD_MINUTES must not be negative")

    timeout = float(os.getenv("HTTP_TIMEOUT_SECONDS", "20"))

    return Settings(
        telegram_bot_token=token,
        telegram_chat_id=chat_id,
        contest_state_path=contest_state_path,
        error_log_path=error_log_path(),
        error_log_max_lines=max_lines,
        reminder_lead_minutes=lead_minutes,
        codeforces_api_url=os.getenv("CODEFORCES_API_URL", "https://codeforces.com/api").rstrip("/"),
        http_timeout_seconds=timeout,
    )
