"""
Shared fixtures: a fixed clock, and in-memory async stand-ins for the repositories.
"""

import uuid
from datetime import date, datetime

import pytest
import pytz

from core.models import CompletionEvent, FocusSession, Profile, Task
from core.time_utils import parse_date

TZ_NAME = "Asia/Shanghai"
OWNER = "owner-1"
OTHER = "owner-2"


@pytest.fixture
def tz():
    return pytz.timezone(TZ_NAME)


@pytest.fixture
def now(tz):
    # Wednesday afternoon
    return tz.localize(datetime(2026, 3, 18, 15, 30))


@pytest.fixture
def today(now):
    return now.date()


class FakeHabitLogs:
    def __init__(self, events=None, fail=None):
        self.events = list(events or [])
        self.fail = fail
        self.queries = []

    def add(self, owner_id, habit_id, d):
        self.events.append(CompletionEvent(owner_id, habit_id, parse_date(d)))

    async def query_completion_dates(self, owner_id, since=None):
        self.queries.append((owner_id, since))
        if self.fail:
            raise self.fail
        return [
            e for e in self.events
            if e.owner_id == owner_id and (since is None or e.completed_date >= parse_date(since))
        ]

    async def count_completions(self, owner_id, since):
        if self.fail:
            raise self.fail
        return len([e for e in self.events if e.owner_id == owner_id and e.completed_date >= parse_date(since)])

    async def upsert_completion(self, owner_id, task_id, completed_date):
        key = (owner_id, task_id, parse_date(completed_date))
        if key not in {(e.owner_id, e.habit_id, e.completed_date) for e in self.events}:
            self.events.append(CompletionEvent(*key))
        return f"{owner_id}|{task_id}|{key[2].isoformat()}"

    async def delete_for_task(self, owner_id, task_id):
        before = len(self.events)
        self.events = [e for e in self.events if not (e.owner_id == owner_id and e.habit_id == task_id)]
        return before - len(self.events)


class FakeSessions:
    def __init__(self, sessions=None, fail=None):
        self.sessions = list(sessions or [])
        self.fail = fail
        self.queries = []

    async def query_focus_sessions(self, owner_id, mode, since_utc):
        self.queries.append((owner_id, mode, since_utc))
        if self.fail:
            raise self.fail
        return [
            s for s in self.sessions
            if s.owner_id == owner_id and s.mode == mode and s.completed_at >= since_utc
        ]

    async def insert_session(self, owner_id, duration_minutes, mode, completed_at_utc):
        self.sessions.append(FocusSession(owner_id, duration_minutes, mode, completed_at_utc))
        return uuid.uuid4().hex


class FakeTasks:
    def __init__(self, fail=None):
        self.tasks = {}
        self.fail = fail

    async def query_habit_count(self, owner_id):
        if self.fail:
            raise self.fail
        return len([t for t in self.tasks.values() if t.owner_id == owner_id])

    async def list_tasks(self, owner_id):
        return [t for t in self.tasks.values() if t.owner_id == owner_id]

    async def create_task(self, owner_id, fields):
        task = Task(id=uuid.uuid4().hex[:12], owner_id=owner_id, **fields)
        self.tasks[task.id] = task
        return task

    async def update_task(self, owner_id, task_id, updates):
        task = self.tasks.get(task_id)
        if task is None or task.owner_id != owner_id:
            return None
        for k, v in updates.items():
            setattr(task, k, v)
        return task

    async def delete_task(self, owner_id, task_id):
        task = self.tasks.get(task_id)
        if task is None or task.owner_id != owner_id:
            return False
        del self.tasks[task_id]
        return True


class FakeProfiles:
    def __init__(self):
        self.profiles = {}

    async def get_profile(self, owner_id):
        return self.profiles.get(owner_id)

    async def create_profile(self, profile: Profile):
        return self.profiles.setdefault(profile.owner_id, profile)

    async def update_profile(self, owner_id, updates):
        profile = self.profiles.get(owner_id)
        if profile is None:
            return None
        for k, v in updates.items():
            setattr(profile, k, v)
        return profile


@pytest.fixture
def habit_logs():
    return FakeHabitLogs()


@pytest.fixture
def sessions():
    return FakeSessions()


@pytest.fixture
def tasks():
    return FakeTasks()


@pytest.fixture
def profiles():
    return FakeProfiles()


def work_session(owner_id, local_dt, minutes, tz, mode="work"):
    """FocusSession as stored: completed_at is UTC-naive."""
    aware = tz.localize(local_dt) if local_dt.tzinfo is None else local_dt
    return FocusSession(owner_id, minutes, mode, aware.astimezone(pytz.utc).replace(tzinfo=None))


def d(value: str) -> date:
    return date.fromisoformat(value)
