# core/db.py
import asyncio
import logging
import threading
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable

import certifi
from pymongo import AsyncMongoClient

from core.config import Settings

logger = logging.getLogger(__name__)

SERVER_SELECTION_TIMEOUT_MS = 8000


def get_client(settings: Settings) -> AsyncMongoClient:
    uri = settings.require_mongo_uri()
    kwargs = {"serverSelectionTimeoutMS": SERVER_SELECTION_TIMEOUT_MS}
    if uri.startswith("mongodb+srv://"):
        # Atlas needs a CA bundle on hosts without system certificates
        kwargs["tlsCAFile"] = certifi.where()
    return AsyncMongoClient(uri, **kwargs)


@asynccontextmanager
async def open_db(settings: Settings):
    """Yield the configured database; the client is bound to the running loop and closed on exit."""
    client = get_client(settings)
    try:
        logger.debug("mongo client opened", extra={"db_name": settings.db_name})
        yield client[settings.db_name]
    finally:
        await client.close()


class DbRunner:
    """
    Long-lived event loop on a daemon thread with one AsyncMongoClient.
    Synchronous callers (Streamlit reruns) submit coroutines with run();
    the client is created on first use and reused until close().
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self.loop.run_forever, name="mongo-loop", daemon=True)
        self._thread.start()
        self._client = None

    async def _database(self):
        if self._client is None:
            self._client = get_client(self.settings)
            logger.debug("mongo client opened", extra={"db_name": self.settings.db_name})
        return self._client[self.settings.db_name]

    async def _run(self, fn: Callable[[Any], Awaitable[Any]]) -> Any:
        return await fn(await self._database())

    def run(self, fn: Callable[[Any], Awaitable[Any]]) -> Any:
        return asyncio.run_coroutine_threadsafe(self._run(fn), self.loop).result()

    def close(self) -> None:
        async def _close():
            if self._client is not None:
                await self._client.close()
                self._client = None

        asyncio.run_coroutine_threadsafe(_close(), self.loop).result()
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join()
        self.loop.close()
