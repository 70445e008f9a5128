# services/registry.py
from dataclasses import dataclass

from data_access.habit_logs_repo import HabitLogsRepo
from data_access.profiles_repo import ProfilesRepo
from data_access.sessions_repo import SessionsRepo
from data_access.tasks_repo import TasksRepo
from services.focus_service import FocusService
from services.profile_service import ProfileService
from services.stats_service import StatsService
from services.task_service import TaskService


@dataclass
class Services:
    stats: StatsService
    tasks: TaskService
    focus: FocusService
    profiles: ProfileService

    @classmethod
    def from_db(cls, db, tz) -> "Services":
        habit_logs = HabitLogsRepo(db)
        sessions = SessionsRepo(db)
        tasks = TasksRepo(db)
        profiles = ProfileService(ProfilesRepo(db))
        return cls(
            stats=StatsService(habit_logs, sessions, tasks, tz),
            tasks=TaskService(tasks, habit_logs, tz),
            focus=FocusService(sessions, tz, profiles=profiles),
            profiles=profiles,
        )
