# services/profile_service.py
import logging
from typing import Any, Dict, Tuple

from core.constants import RANKS, XP_PER_LEVEL
from core.models import Profile, StreakSummary

logger = logging.getLogger(__name__)


def rank_for_level(level: int) -> str:
    return RANKS[min(level // 5, len(RANKS) - 1)]

def apply_xp(level: int, xp: int, gain: int) -> Tuple[int, int]:
    """Carry XP over level boundaries; returns (level, xp)."""
    xp += gain
    while xp >= XP_PER_LEVEL:
        xp -= XP_PER_LEVEL
        level += 1
    return level, xp


class ProfileService:
    def __init__(self, profiles):
        self.profiles = profiles

    async def get_or_create_profile(self, owner_id: str, email: str) -> Profile:
        profile = await self.profiles.get_profile(owner_id)
        if profile is not None:
            return profile
        profile = await self.profiles.create_profile(Profile(
            owner_id=owner_id,
            nickname=(email or "").split("@")[0] or owner_id,
            email=email or "",
            rank=rank_for_level(1),
        ))
        logger.info("profile created", extra={"owner": owner_id})
        return profile

    async def update_profile(self, owner_id: str, updates: Dict[str, Any]) -> Profile:
        updates = dict(updates)
        if "nickname" in updates:
            updates["nickname"] = (updates["nickname"] or "").strip()
            if not updates["nickname"]:
                raise ValueError("nickname is required")
        if "dark_mode" in updates:
            updates["dark_mode"] = bool(updates["dark_mode"])
        profile = await self.profiles.update_profile(owner_id, updates)
        if profile is None:
            raise LookupError(f"no profile for owner {owner_id!r}")
        return profile

    async def add_xp(self, owner_id: str, gain: int) -> Profile:
        profile = await self.profiles.get_profile(owner_id)
        if profile is None:
            raise LookupError(f"no profile for owner {owner_id!r}")
        level, xp = apply_xp(profile.level, profile.xp, gain)
        if level != profile.level:
            logger.info("level up", extra={"owner": owner_id, "level": level})
        return await self.update_profile(owner_id, {"xp": xp, "level": level, "rank": rank_for_level(level)})

    async def sync_streak(self, owner_id: str, streak: StreakSummary) -> Profile:
        return await self.update_profile(
            owner_id, {"streak": streak.current_streak, "max_streak": streak.max_streak}
        )
