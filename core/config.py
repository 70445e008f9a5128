# core/config.py
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from core.constants import MODE_BREAK, MODE_WORK

APP_TITLE = "HabitMaster"
PAGE_ICON = "🔥"
# chime played when the timer hands over to the given mode
TRANSITION_SOUNDS = {
    MODE_WORK: "https://assets.mixkit.co/active_storage/sfx/2568/2568-preview.mp3",
    MODE_BREAK: "https://assets.mixkit.co/active_storage/sfx/2869/2869-preview.mp3",
}

POMODORO_MIN = 25
BREAK_MIN = 5

DEFAULT_DB_NAME = "habit_tracker"
DEFAULT_TIMEZONE = "Asia/Shanghai"
DEFAULT_HEATMAP_DAYS = 70


@dataclass(frozen=True)
class Settings:
    mongo_uri: str
    db_name: str
    user_id: str
    user_email: str
    timezone: str
    heatmap_days: int
    log_level: str

    def require_mongo_uri(self) -> str:
        if not self.mongo_uri:
            raise RuntimeError("MONGO_URI is not configured (set it in .streamlit/secrets.toml or the environment).")
        return self.mongo_uri


def _lookup(secrets: Optional[Mapping[str, Any]], *names: str, default: str = "") -> str:
    """First non-empty value among `names`, secrets before environment."""
    for name in names:
        if secrets is not None and secrets.get(name):
            return str(secrets.get(name)).strip()
        if os.getenv(name):
            return os.getenv(name, "").strip()
    return default


def load_settings(secrets: Optional[Mapping[str, Any]] = None) -> Settings:
    days = _lookup(secrets, "HEATMAP_DAYS", default=str(DEFAULT_HEATMAP_DAYS))
    try:
        heatmap_days = int(days)
    except ValueError:
        raise ValueError(f"HEATMAP_DAYS must be an integer, got {days!r}")
    if heatmap_days < 0:
        raise ValueError(f"HEATMAP_DAYS must be >= 0, got {heatmap_days}")
    return Settings(
        mongo_uri=_lookup(secrets, "MONGO_URI", "mongo_uri"),
        db_name=_lookup(secrets, "DB_NAME", default=DEFAULT_DB_NAME),
        user_id=_lookup(secrets, "USER_ID", default="demo"),
        user_email=_lookup(secrets, "USER_EMAIL", default="demo@example.com"),
        timezone=_lookup(secrets, "TIMEZONE", default=DEFAULT_TIMEZONE),
        heatmap_days=heatmap_days,
        log_level=_lookup(secrets, "LOG_LEVEL", default="INFO").upper(),
    )
