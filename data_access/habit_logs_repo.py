# data_access/habit_logs_repo.py
from datetime import date
from typing import Any, Dict, List, Optional

from core.models import CompletionEvent
from core.time_utils import DateLike, parse_date, utc_now_naive
from data_access.scoping import ensure_scoped, query_errors, require_owner

PROJECTION = {"_id": 0, "user": 1, "task_id": 1, "completed_date": 1, "created_at": 1}


def _event_from_doc(doc: Dict[str, Any]) -> CompletionEvent:
    return CompletionEvent(
        owner_id=doc["user"],
        habit_id=doc["task_id"],
        completed_date=parse_date(doc["completed_date"]),
        recorded_at=doc.get("created_at"),
    )


class HabitLogsRepo:
    """One row per (user, task_id, completed_date); dates stored as YYYY-MM-DD strings."""

    def __init__(self, db):
        self.col = db.habit_logs

    async def query_completion_dates(self, owner_id: str, since: Optional[DateLike] = None) -> List[CompletionEvent]:
        owner_id = require_owner(owner_id)
        query: Dict[str, Any] = {"user": owner_id}
        if since is not None:
            query["completed_date"] = {"$gte": parse_date(since).isoformat()}
        with query_errors("Loading completion history"):
            docs = await self.col.find(query, PROJECTION).sort("completed_date", -1).to_list()
        return [_event_from_doc(d) for d in ensure_scoped(docs, owner_id, "habit_logs")]

    async def count_completions(self, owner_id: str, since: DateLike) -> int:
        owner_id = require_owner(owner_id)
        with query_errors("Counting completions"):
            return await self.col.count_documents(
                {"user": owner_id, "completed_date": {"$gte": parse_date(since).isoformat()}}
            )

    async def upsert_completion(self, owner_id: str, task_id: str, completed_date: date) -> str:
        """Idempotent: a second completion of the same habit on the same day is a no-op."""
        owner_id = require_owner(owner_id)
        day = parse_date(completed_date).isoformat()
        _id = f"{owner_id}|{task_id}|{day}"
        with query_errors("Recording habit completion"):
            await self.col.update_one(
                {"user": owner_id, "task_id": task_id, "completed_date": day},
                {"$setOnInsert": {"_id": _id, "created_at": utc_now_naive()}},
                upsert=True,
            )
        return _id

    async def delete_for_task(self, owner_id: str, task_id: str) -> int:
        owner_id = require_owner(owner_id)
        with query_errors("Deleting habit history"):
            res = await self.col.delete_many({"user": owner_id, "task_id": task_id})
        return res.deleted_count
