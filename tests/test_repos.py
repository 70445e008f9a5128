"""Tests for the owner-scoped MongoDB repositories, against a mocked pymongo collection."""

from datetime import date, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from conftest import OTHER, OWNER
from core.errors import QueryError
from core.models import Profile
from data_access.habit_logs_repo import HabitLogsRepo
from data_access.profiles_repo import ProfilesRepo
from data_access.sessions_repo import SessionsRepo
from data_access.tasks_repo import TasksRepo


def mock_find(col, docs):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    col.find.return_value = cursor
    return cursor


@pytest.fixture
def db():
    return MagicMock()


class TestHabitLogsRepo:
    @pytest.mark.asyncio
    async def test_filter_is_owner_scoped_with_since(self, db):
        mock_find(db.habit_logs, [
            {"user": OWNER, "task_id": "t1", "completed_date": "2026-03-18"},
            {"user": OWNER, "task_id": "t2", "completed_date": "2026-03-17"},
        ])
        events = await HabitLogsRepo(db).query_completion_dates(OWNER, date(2026, 3, 1))

        query = db.habit_logs.find.call_args[0][0]
        assert query == {"user": OWNER, "completed_date": {"$gte": "2026-03-01"}}
        assert [e.completed_date for e in events] == [date(2026, 3, 18), date(2026, 3, 17)]
        assert events[0].habit_id == "t1"

    @pytest.mark.asyncio
    async def test_without_since_reads_whole_history(self, db):
        mock_find(db.habit_logs, [])
        await HabitLogsRepo(db).query_completion_dates(OWNER)
        assert db.habit_logs.find.call_args[0][0] == {"user": OWNER}

    @pytest.mark.asyncio
    async def test_foreign_rows_rejected(self, db):
        mock_find(db.habit_logs, [{"user": OTHER, "task_id": "t1", "completed_date": "2026-03-18"}])
        with pytest.raises(QueryError, match="outside the requested owner"):
            await HabitLogsRepo(db).query_completion_dates(OWNER)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("owner", ["", "   ", None])
    async def test_owner_required(self, db, owner):
        with pytest.raises(ValueError):
            await HabitLogsRepo(db).query_completion_dates(owner)
        db.habit_logs.find.assert_not_called()

    @pytest.mark.asyncio
    async def test_driver_error_wrapped(self, db):
        cursor = mock_find(db.habit_logs, [])
        cursor.to_list.side_effect = ServerSelectionTimeoutError("no servers")
        with pytest.raises(QueryError, match="Loading completion history failed") as exc:
            await HabitLogsRepo(db).query_completion_dates(OWNER)
        assert isinstance(exc.value.__cause__, ServerSelectionTimeoutError)

    @pytest.mark.asyncio
    async def test_upsert_is_keyed_on_owner_task_date(self, db):
        db.habit_logs.update_one = AsyncMock()
        _id = await HabitLogsRepo(db).upsert_completion(OWNER, "t1", date(2026, 3, 18))

        args, kwargs = db.habit_logs.update_one.call_args
        assert args[0] == {"user": OWNER, "task_id": "t1", "completed_date": "2026-03-18"}
        assert args[1]["$setOnInsert"]["_id"] == _id == f"{OWNER}|t1|2026-03-18"
        assert kwargs["upsert"] is True

    @pytest.mark.asyncio
    async def test_count_completions(self, db):
        db.habit_logs.count_documents = AsyncMock(return_value=7)
        assert await HabitLogsRepo(db).count_completions(OWNER, "2026-03-01") == 7
        db.habit_logs.count_documents.assert_awaited_once_with(
            {"user": OWNER, "completed_date": {"$gte": "2026-03-01"}}
        )


class TestSessionsRepo:
    @pytest.mark.asyncio
    async def test_query_filters_mode_and_time(self, db):
        since = datetime(2026, 3, 17, 16, 0)
        mock_find(db.focus_sessions, [
            {"user": OWNER, "duration_minutes": 25, "mode": "work", "completed_at": datetime(2026, 3, 18, 1, 0)},
        ])
        sessions = await SessionsRepo(db).query_focus_sessions(OWNER, "work", since)

        assert db.focus_sessions.find.call_args[0][0] == {
            "user": OWNER, "mode": "work", "completed_at": {"$gte": since},
        }
        assert sessions[0].duration_minutes == 25

    @pytest.mark.asyncio
    async def test_unknown_mode(self, db):
        with pytest.raises(ValueError):
            await SessionsRepo(db).query_focus_sessions(OWNER, "nap", datetime(2026, 1, 1))

    @pytest.mark.asyncio
    async def test_insert(self, db):
        db.focus_sessions.insert_one = AsyncMock()
        at = datetime(2026, 3, 18, 1, 0)
        sid = await SessionsRepo(db).insert_session(OWNER, 25, "work", at)
        doc = db.focus_sessions.insert_one.call_args[0][0]
        assert doc["_id"] == sid
        assert doc["user"] == OWNER
        assert doc["completed_at"] == at


class TestTasksRepo:
    @pytest.mark.asyncio
    async def test_habit_count(self, db):
        db.tasks.count_documents = AsyncMock(return_value=3)
        assert await TasksRepo(db).query_habit_count(OWNER) == 3
        db.tasks.count_documents.assert_awaited_once_with({"user": OWNER})

    @pytest.mark.asyncio
    async def test_create_drops_unknown_fields(self, db):
        db.tasks.insert_one = AsyncMock()
        task = await TasksRepo(db).create_task(OWNER, {
            "title": "Run", "category": "Health", "time": "08:30", "completed": False, "user": OTHER,
        })
        doc = db.tasks.insert_one.call_args[0][0]
        assert doc["user"] == OWNER
        assert task.owner_id == OWNER
        assert task.title == "Run"

    @pytest.mark.asyncio
    async def test_update_missing_returns_none(self, db):
        db.tasks.find_one_and_update = AsyncMock(return_value=None)
        assert await TasksRepo(db).update_task(OWNER, "nope", {"completed": True}) is None
        assert db.tasks.find_one_and_update.call_args[0][0] == {"_id": "nope", "user": OWNER}

    @pytest.mark.asyncio
    async def test_delete(self, db):
        db.tasks.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
        assert await TasksRepo(db).delete_task(OWNER, "t1") is True
        db.tasks.delete_one.assert_awaited_once_with({"_id": "t1", "user": OWNER})


class TestProfilesRepo:
    @pytest.mark.asyncio
    async def test_get_missing(self, db):
        db.user_profiles.find_one = AsyncMock(return_value=None)
        assert await ProfilesRepo(db).get_profile(OWNER) is None

    @pytest.mark.asyncio
    async def test_create_uses_set_on_insert(self, db):
        db.user_profiles.find_one_and_update = AsyncMock(return_value={"user": OWNER, "nickname": "me", "xp": 0})
        profile = await ProfilesRepo(db).create_profile(Profile(owner_id=OWNER, nickname="me", email="me@x.io"))
        args, kwargs = db.user_profiles.find_one_and_update.call_args
        assert args[0] == {"_id": OWNER, "user": OWNER}
        assert args[1]["$setOnInsert"]["nickname"] == "me"
        assert kwargs["upsert"] is True
        assert profile.nickname == "me"
