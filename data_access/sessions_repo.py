# data_access/sessions_repo.py
import uuid
from datetime import datetime
from typing import Any, Dict, List

from core.constants import ALLOWED_MODES
from core.models import FocusSession
from core.time_utils import utc_now_naive
from data_access.scoping import ensure_scoped, query_errors, require_owner

PROJECTION = {"_id": 0, "user": 1, "duration_minutes": 1, "mode": 1, "completed_at": 1}


def _session_from_doc(doc: Dict[str, Any]) -> FocusSession:
    return FocusSession(
        owner_id=doc["user"],
        duration_minutes=int(doc["duration_minutes"]),
        mode=doc["mode"],
        completed_at=doc["completed_at"],
    )


class SessionsRepo:
    def __init__(self, db):
        self.col = db.focus_sessions

    async def query_focus_sessions(self, owner_id: str, mode: str, since_utc: datetime) -> List[FocusSession]:
        """Sessions of one mode completed at/after `since_utc` (UTC-naive)."""
        owner_id = require_owner(owner_id)
        if mode not in ALLOWED_MODES:
            raise ValueError(f"unknown session mode {mode!r}")
        query = {"user": owner_id, "mode": mode, "completed_at": {"$gte": since_utc}}
        with query_errors("Loading focus sessions"):
            docs = await self.col.find(query, PROJECTION).sort("completed_at", 1).to_list()
        return [_session_from_doc(d) for d in ensure_scoped(docs, owner_id, "focus_sessions")]

    async def insert_session(self, owner_id: str, duration_minutes: int, mode: str,
                             completed_at_utc: datetime) -> str:
        owner_id = require_owner(owner_id)
        sid = uuid.uuid4().hex
        doc = {
            "_id": sid,
            "user": owner_id,
            "duration_minutes": int(duration_minutes),
            "mode": mode,
            "completed_at": completed_at_utc,
            "created_at": utc_now_naive(),
        }
        with query_errors("Recording focus session"):
            await self.col.insert_one(doc)
        return sid
