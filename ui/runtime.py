from typing import Any, Awaitable, Callable

import streamlit as st

from core.config import Settings
from core.db import DbRunner
from core.errors import QueryError
from services.registry import Services


@st.cache_resource(show_spinner=False)
def get_runner(settings: Settings) -> DbRunner:
    return DbRunner(settings)

def call(settings: Settings, tz, fn: Callable[[Services], Awaitable[Any]]) -> Any:
    """Run one fetch/write on the shared loop and client."""
    async def _go(db):
        return await fn(Services.from_db(db, tz))
    return get_runner(settings).run(_go)

def call_or_stop(settings: Settings, tz, fn: Callable[[Services], Awaitable[Any]], what: str) -> Any:
    try:
        return call(settings, tz, fn)
    except QueryError as e:
        st.error(f"❌ {what}: {e}")
        st.stop()
