# data_access/profiles_repo.py
from dataclasses import asdict
from typing import Any, Dict, Optional

from pymongo import ReturnDocument

from core.models import Profile
from core.time_utils import utc_now_naive
from data_access.scoping import ensure_scoped, query_errors, require_owner

EDITABLE_FIELDS = {"nickname", "email", "level", "xp", "rank", "streak", "max_streak", "dark_mode"}


def _profile_from_doc(doc: Dict[str, Any]) -> Profile:
    return Profile(
        owner_id=doc["user"],
        nickname=doc.get("nickname", ""),
        email=doc.get("email", ""),
        level=int(doc.get("level", 1)),
        xp=int(doc.get("xp", 0)),
        rank=doc.get("rank", ""),
        streak=int(doc.get("streak", 0)),
        max_streak=int(doc.get("max_streak", 0)),
        dark_mode=bool(doc.get("dark_mode", True)),
    )


class ProfilesRepo:
    """One profile document per owner, keyed by the owner id."""

    def __init__(self, db):
        self.col = db.user_profiles

    async def get_profile(self, owner_id: str) -> Optional[Profile]:
        owner_id = require_owner(owner_id)
        with query_errors("Loading profile"):
            doc = await self.col.find_one({"_id": owner_id, "user": owner_id})
        if doc is None:
            return None
        return _profile_from_doc(ensure_scoped([doc], owner_id, "user_profiles")[0])

    async def create_profile(self, profile: Profile) -> Profile:
        """Insert if missing; a concurrent first login keeps whichever document landed first."""
        owner_id = require_owner(profile.owner_id)
        now = utc_now_naive()
        fields = {k: v for k, v in asdict(profile).items() if k in EDITABLE_FIELDS}
        with query_errors("Creating profile"):
            doc = await self.col.find_one_and_update(
                {"_id": owner_id, "user": owner_id},
                {"$setOnInsert": {**fields, "created_at": now, "updated_at": now}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        return _profile_from_doc(doc)

    async def update_profile(self, owner_id: str, updates: Dict[str, Any]) -> Optional[Profile]:
        owner_id = require_owner(owner_id)
        changes = {k: v for k, v in updates.items() if k in EDITABLE_FIELDS}
        changes["updated_at"] = utc_now_naive()
        with query_errors("Updating profile"):
            doc = await self.col.find_one_and_update(
                {"_id": owner_id, "user": owner_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            return None
        return _profile_from_doc(doc)
