# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Put GEMINI_API_KEY in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "OSAI_APP_NAME": "App display name (default: osai).",
    "OSAI_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "OSAI_DATA_DIR": "Local data directory (default: .local/osai). Also holds osai.log.",
    "OSAI_TASKS_PATH": "Task list JSON (default: <data_dir>/scheduled_tasks.json).",
    "OSAI_LYRIC_PATH": "Handoff file for the synthesis engine (default: <data_dir>/lyric.txt).",
    # Gemini
    "GEMINI_API_KEY": "Gemini API key (OSAI_GEMINI_API_KEY also accepted). Without it reminders use fallback text.",
    "OSAI_GEMINI_BASE_URL": "API base (default: https://generativelanguage.googleapis.com/v1beta).",
    "OSAI_GEMINI_MODEL": "Model name (default: gemini-2.5-flash-preview-09-2025).",
    "OSAI_SYSTEM_INSTRUCTION": "Persona/language instruction sent with every request.",
    "OSAI_LLM_CONNECT_TIMEOUT_SECONDS": "HTTP connect timeout (default: 5).",
    "OSAI_LLM_READ_TIMEOUT_SECONDS": "HTTP read timeout (default: 30).",
    "OSAI_LLM_MAX_ATTEMPTS": "Attempts per request before giving up (default: 3; backoff 1s, 2s, ...).",
    # Scheduler
    "OSAI_POLL_INTERVAL_SECONDS": "How often the task file is polled (default: 5).",
    "OSAI_NOTIFICATION_LEAD_MINUTES": "How long before a task the reminder fires (default: 5).",
    "OSAI_TIME_LABEL_FORMAT": "strftime format of the spoken time (default: %H時%M分).",
    # Synthesis / playback
    "OSAI_EMOTION_PARAMS": "14 comma-separated values 0..255 appended to the lyric (default: all 5).",
    "OSAI_SYNTH_COMMAND": "Voice synthesis command; {lyric} is replaced by the handoff path (default: none).",
    "OSAI_PLAY_COMMAND": "Audio playback command; {lyric} is replaced by the handoff path (default: sh Aplay.sh).",
}
