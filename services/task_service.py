# services/task_service.py
import logging
import re
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from core.constants import ALL_DAY, CATEGORIES, FREQUENCIES
from core.models import Task
from core.time_utils import ensure_aware, local_today

logger = logging.getLogger(__name__)

REMINDER_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _clean_days(days: Iterable[int]) -> List[int]:
    out = sorted({int(d) for d in days})
    if any(d < 0 or d > 6 for d in out):
        raise ValueError("selected_days must be within 0 (Mon) .. 6 (Sun)")
    return out


class TaskService:
    def __init__(self, tasks, habit_logs, tz):
        self.tasks = tasks
        self.habit_logs = habit_logs
        self.tz = tz

    async def list_tasks(self, owner_id: str) -> List[Task]:
        return await self.tasks.list_tasks(owner_id)

    async def add_task(self, owner_id: str, title: str, category: str = "Health",
                       frequency: str = "daily", selected_days: Optional[Iterable[int]] = None,
                       reminder_enabled: bool = True, reminder_time: str = "08:30",
                       icon: str = "star", color: str = "primary") -> Task:
        title = (title or "").strip()
        if not title:
            raise ValueError("title is required")
        if category not in CATEGORIES:
            raise ValueError(f"unknown category {category!r}")
        if frequency not in FREQUENCIES:
            raise ValueError(f"unknown frequency {frequency!r}")
        if reminder_enabled and not REMINDER_RE.match(reminder_time or ""):
            raise ValueError("reminder_time must look like HH:MM")

        task = await self.tasks.create_task(owner_id, {
            "title": title,
            "category": category,
            "time": reminder_time if reminder_enabled else ALL_DAY,
            "completed": False,
            "icon": icon,
            "color": color,
            "frequency": frequency,
            "selected_days": _clean_days(selected_days if selected_days is not None else [0, 1, 2, 3, 4]),
            "reminder_enabled": bool(reminder_enabled),
            "reminder_time": reminder_time,
        })
        logger.info("habit created", extra={"owner": owner_id, "task_id": task.id})
        return task

    async def update_task(self, owner_id: str, task_id: str, updates: Dict[str, Any]) -> Optional[Task]:
        updates = dict(updates)
        if "title" in updates:
            updates["title"] = (updates["title"] or "").strip()
            if not updates["title"]:
                raise ValueError("title is required")
        if "selected_days" in updates:
            updates["selected_days"] = _clean_days(updates["selected_days"])
        return await self.tasks.update_task(owner_id, task_id, updates)

    async def toggle_task(self, owner_id: str, task_id: str, completed: bool,
                          now: datetime) -> Optional[Task]:
        """Flip the completed flag; completing also logs today's completion event."""
        task = await self.tasks.update_task(owner_id, task_id, {"completed": bool(completed)})
        if task is None:
            return None
        if completed:
            today = local_today(ensure_aware(now, self.tz), self.tz)
            await self.habit_logs.upsert_completion(owner_id, task_id, today)
            logger.info("habit completed", extra={"owner": owner_id, "task_id": task_id, "date": today.isoformat()})
        return task

    async def delete_task(self, owner_id: str, task_id: str) -> bool:
        deleted = await self.tasks.delete_task(owner_id, task_id)
        if deleted:
            # completion history goes with the habit
            await self.habit_logs.delete_for_task(owner_id, task_id)
        return deleted
