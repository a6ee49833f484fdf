# src/osai_core/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (the Gemini key is only checked on use).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "OSAI"

DEFAULT_SYSTEM_INSTRUCTION = (
    "Act as a helpful and friendly small AI assistant. "
    "Respond concisely and clearly in Japanese."
)
DEFAULT_EMOTION_PARAMS = "5,5,5,5,5,5,5,5,5,5,5,5,5,5"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


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

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_path: Path
    lyric_path: Path

    # ---- Gemini ----
    gemini_api_key: str | None
    gemini_base_url: str
    gemini_model: str
    system_instruction: str
    llm_connect_timeout_seconds: float
    llm_read_timeout_seconds: float
    llm_max_attempts: int

    # ---- Scheduler ----
    poll_interval_seconds: float
    notification_lead_minutes: int
    time_label_format: str

    # ---- Synthesis / playback ----
    emotion_params: str
    synth_command: str
    play_command: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "osai")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/osai"))
        tasks_path = _env_path(_k("TASKS_PATH"), data_dir / "scheduled_tasks.json")
        lyric_path = _env_path(_k("LYRIC_PATH"), data_dir / "lyric.txt")

        # Accept the plain GEMINI_API_KEY used by Google's own tooling as well.
        gemini_api_key = _first_env(_k("GEMINI_API_KEY"), "GEMINI_API_KEY", default=None)
        gemini_base_url = _env(
            _k("GEMINI_BASE_URL"), "https://generativelanguage.googleapis.com/v1beta"
        ).rstrip("/")
        gemini_model = _env(_k("GEMINI_MODEL"), "gemini-2.5-flash-preview-09-2025")
        system_instruction = _env(_k("SYSTEM_INSTRUCTION"), DEFAULT_SYSTEM_INSTRUCTION)

        llm_connect_timeout_seconds = _env_float(_k("LLM_CONNECT_TIMEOUT_SECONDS"), 5.0)
        llm_read_timeout_seconds = _env_float(_k("LLM_READ_TIMEOUT_SECONDS"), 30.0)
        llm_max_attempts = max(1, _env_int(_k("LLM_MAX_ATTEMPTS"), 3))

        poll_interval_seconds = max(0.5, _env_float(_k("POLL_INTERVAL_SECONDS"), 5.0))
        notification_lead_minutes = max(1, _env_int(_k("NOTIFICATION_LEAD_MINUTES"), 5))
        time_label_format = _env(_k("TIME_LABEL_FORMAT"), "%H時%M分")

        emotion_params = _env(_k("EMOTION_PARAMS"), DEFAULT_EMOTION_PARAMS)
        synth_command = _env(_k("SYNTH_COMMAND"), "").strip()
        play_command = _env(_k("PLAY_COMMAND"), "sh Aplay.sh").strip()

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_path=tasks_path,
            lyric_path=lyric_path,
            gemini_api_key=gemini_api_key,
            gemini_base_url=gemini_base_url,
            gemini_model=gemini_model,
            system_instruction=system_instruction,
            llm_connect_timeout_seconds=llm_connect_timeout_seconds,
            llm_read_timeout_seconds=llm_read_timeout_seconds,
            llm_max_attempts=llm_max_attempts,
            poll_interval_seconds=poll_interval_seconds,
            notification_lead_minutes=notification_lead_minutes,
            time_label_format=time_label_format,
            emotion_params=emotion_params,
            synth_command=synth_command,
            play_command=play_command,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
