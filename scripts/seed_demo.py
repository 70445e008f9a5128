#!/usr/bin/env python3
"""
Seed demo habits, completion history and focus sessions for one owner.

Run: python -m scripts.seed_demo
Env: MONGO_URI (required), DB_NAME, USER_ID, USER_EMAIL, TIMEZONE, SEED_DAYS (default 90)
"""
import asyncio
import os
import random
from datetime import datetime, time, timedelta

from core.config import load_settings
from core.db import open_db
from core.log import configure_logging
from core.time_utils import get_tz, local_today, now_in
from services.registry import Services

HABITS = [
    ("Morning run", "Health"),
    ("Read 20 pages", "Study"),
    ("Inbox zero", "Work"),
    ("Call family", "Social"),
]


async def seed(settings, days: int):
    tz = get_tz(settings.timezone)
    owner = settings.user_id
    now = now_in(tz)
    today = local_today(now, tz)

    async with open_db(settings) as db:
        services = Services.from_db(db, tz)
        await services.profiles.get_or_create_profile(owner, settings.user_email)
        tasks = [await services.tasks.add_task(owner, title, category=cat) for title, cat in HABITS]

        for offset in range(days, -1, -1):
            day = today - timedelta(days=offset)
            for task in tasks:
                if random.random() < 0.6:
                    await services.tasks.habit_logs.upsert_completion(owner, task.id, day)
            for _ in range(random.randint(0, 4)):
                completed_at = tz.localize(datetime.combine(day, time(hour=random.randint(7, 22))))
                if completed_at > now:
                    continue
                await services.focus.record_focus_session(owner, 25, "work", completed_at)

    print(f"[done] seeded {len(tasks)} habits over {days + 1} days for owner={owner}")


def main():
    settings = load_settings()
    configure_logging(settings.log_level)
    random.seed(42)
    asyncio.run(seed(settings, int(os.getenv("SEED_DAYS", "90"))))


if __name__ == "__main__":
    main()
