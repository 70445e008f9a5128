"""Tests for the shared event loop runner that keeps one Mongo client across reruns."""

from unittest.mock import AsyncMock, MagicMock

import pytest

import core.db
from core.config import Settings
from core.db import DbRunner
from core.errors import QueryError


def settings(uri="mongodb://localhost:27017"):
    return Settings(mongo_uri=uri, db_name="habit_tracker_test", user_id="demo",
                    user_email="", timezone="Asia/Shanghai", heatmap_days=70, log_level="INFO")


@pytest.fixture
def client(monkeypatch):
    client = MagicMock()
    client.__getitem__.return_value = "db-handle"
    client.close = AsyncMock()
    factory = MagicMock(return_value=client)
    monkeypatch.setattr(core.db, "get_client", factory)
    client.factory = factory
    return client


@pytest.fixture
def runner(client):
    runner = DbRunner(settings())
    yield runner
    if not runner.loop.is_closed():
        runner.close()


class TestDbRunner:
    def test_client_created_once(self, runner, client):
        async def fetch(db):
            return db

        assert runner.run(fetch) == "db-handle"
        assert runner.run(fetch) == "db-handle"
        client.factory.assert_called_once()
        client.__getitem__.assert_called_with("habit_tracker_test")

    def test_errors_propagate(self, runner):
        async def broken(db):
            raise QueryError("Loading habits failed: timeout")

        with pytest.raises(QueryError, match="timeout"):
            runner.run(broken)

    def test_close_closes_client(self, runner, client):
        async def fetch(db):
            return db

        runner.run(fetch)
        runner.close()
        client.close.assert_awaited_once()
        assert runner.loop.is_closed()

    def test_close_without_use(self, runner, client):
        runner.close()
        client.factory.assert_not_called()
        client.close.assert_not_awaited()
