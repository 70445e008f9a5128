# services/focus_service.py
import logging
from datetime import datetime
from typing import Optional

from core.constants import ALLOWED_MODES, MODE_WORK, XP_PER_FOCUS_SESSION
from core.models import TodayFocus
from core.time_utils import ensure_aware, local_midnight, local_today, now_in, to_utc_naive

logger = logging.getLogger(__name__)


class FocusService:
    def __init__(self, sessions, tz, profiles=None):
        self.sessions = sessions
        self.tz = tz
        self.profiles = profiles

    async def record_focus_session(self, owner_id: str, duration_minutes: int, mode: str,
                                   completed_at: Optional[datetime] = None) -> str:
        """Store a finished Pomodoro; work sessions also earn XP when a profile service is wired."""
        mode = str(mode).strip().lower()
        if mode not in ALLOWED_MODES:
            raise ValueError(f"mode must be one of {sorted(ALLOWED_MODES)}, got {mode!r}")
        duration_minutes = int(duration_minutes)
        if duration_minutes < 1:
            raise ValueError("duration_minutes must be a positive integer")

        completed_at = ensure_aware(completed_at, self.tz) if completed_at else now_in(self.tz)
        sid = await self.sessions.insert_session(
            owner_id, duration_minutes, mode, to_utc_naive(completed_at, self.tz)
        )
        logger.info("focus session recorded", extra={"owner": owner_id, "mode": mode, "minutes": duration_minutes})

        if mode == MODE_WORK and self.profiles is not None:
            await self.profiles.add_xp(owner_id, XP_PER_FOCUS_SESSION)
        return sid

    async def get_today_focus_stats(self, owner_id: str, now: datetime) -> TodayFocus:
        today = local_today(ensure_aware(now, self.tz), self.tz)
        since = to_utc_naive(local_midnight(today, self.tz), self.tz)
        sessions = await self.sessions.query_focus_sessions(owner_id, MODE_WORK, since)
        return TodayFocus(
            completed_count=len(sessions),
            total_minutes=sum(s.duration_minutes for s in sessions),
        )
