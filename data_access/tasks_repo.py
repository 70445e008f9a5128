# data_access/tasks_repo.py
import uuid
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument

from core.models import Task
from core.time_utils import utc_now_naive
from data_access.scoping import ensure_scoped, query_errors, require_owner

EDITABLE_FIELDS = {
    "title", "category", "time", "completed", "icon", "color",
    "frequency", "selected_days", "reminder_enabled", "reminder_time",
}


def _task_from_doc(doc: Dict[str, Any]) -> Task:
    return Task(
        id=doc["_id"],
        owner_id=doc["user"],
        title=doc["title"],
        category=doc.get("category", "Health"),
        time=doc.get("time", ""),
        completed=bool(doc.get("completed", False)),
        icon=doc.get("icon", "star"),
        color=doc.get("color", "primary"),
        frequency=doc.get("frequency", "daily"),
        selected_days=list(doc.get("selected_days", [0, 1, 2, 3, 4])),
        reminder_enabled=bool(doc.get("reminder_enabled", True)),
        reminder_time=doc.get("reminder_time", "08:30"),
        created_at=doc.get("created_at"),
        updated_at=doc.get("updated_at"),
    )


class TasksRepo:
    def __init__(self, db):
        self.col = db.tasks

    async def query_habit_count(self, owner_id: str) -> int:
        owner_id = require_owner(owner_id)
        with query_errors("Counting habits"):
            return await self.col.count_documents({"user": owner_id})

    async def list_tasks(self, owner_id: str) -> List[Task]:
        owner_id = require_owner(owner_id)
        with query_errors("Loading habits"):
            docs = await self.col.find({"user": owner_id}).sort("created_at", -1).to_list()
        return [_task_from_doc(d) for d in ensure_scoped(docs, owner_id, "tasks")]

    async def create_task(self, owner_id: str, fields: Dict[str, Any]) -> Task:
        owner_id = require_owner(owner_id)
        now = utc_now_naive()
        doc = {k: v for k, v in fields.items() if k in EDITABLE_FIELDS}
        doc.update({"_id": uuid.uuid4().hex[:12], "user": owner_id, "created_at": now, "updated_at": now})
        with query_errors("Creating habit"):
            await self.col.insert_one(doc)
        return _task_from_doc(doc)

    async def update_task(self, owner_id: str, task_id: str, updates: Dict[str, Any]) -> Optional[Task]:
        owner_id = require_owner(owner_id)
        changes = {k: v for k, v in updates.items() if k in EDITABLE_FIELDS}
        changes["updated_at"] = utc_now_naive()
        with query_errors("Updating habit"):
            doc = await self.col.find_one_and_update(
                {"_id": task_id, "user": owner_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            return None
        return _task_from_doc(ensure_scoped([doc], owner_id, "tasks")[0])

    async def delete_task(self, owner_id: str, task_id: str) -> bool:
        owner_id = require_owner(owner_id)
        with query_errors("Deleting habit"):
            res = await self.col.delete_one({"_id": task_id, "user": owner_id})
        return res.deleted_count > 0
