# services/stats_service.py
"""
Statistics page queries: each operation fetches once from the store and
reduces in-process with the helpers in core.stats. Failures from the store
propagate as QueryError; nothing here retries or returns partial data.
"""
import asyncio
import logging
from datetime import datetime, timedelta
from typing import List, Union

from core.config import DEFAULT_HEATMAP_DAYS
from core.constants import MODE_WORK
from core.models import ChartPoint, Dashboard, HeatmapCell, MonthlyStats, StreakSummary
from core.stats import (
    ChartPeriod, aggregate_chart, build_heatmap, compute_streak, count_by_date,
    monthly_rate, period_lower_bound, with_default_template,
)
from core.time_utils import days_elapsed_in_month, ensure_aware, local_today, month_start, to_utc_naive

logger = logging.getLogger(__name__)


async def gather_or_cancel(*aws):
    """Like asyncio.gather, but the first failure cancels and awaits the siblings before re-raising."""
    tasks = [asyncio.ensure_future(a) for a in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for t in tasks:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class StatsService:
    def __init__(self, habit_logs, sessions, tasks, tz):
        self.habit_logs = habit_logs
        self.sessions = sessions
        self.tasks = tasks
        self.tz = tz

    def _now(self, now: datetime) -> datetime:
        return ensure_aware(now, self.tz)

    async def get_habit_heatmap(self, owner_id: str, now: datetime,
                                days: int = DEFAULT_HEATMAP_DAYS) -> List[HeatmapCell]:
        if days < 0:
            raise ValueError(f"heatmap window must be >= 0 days, got {days}")
        today = local_today(self._now(now), self.tz)
        events = await self.habit_logs.query_completion_dates(owner_id, today - timedelta(days=days))
        cells = build_heatmap(count_by_date(e.completed_date for e in events), today, days)
        logger.debug("heatmap built", extra={"owner": owner_id, "events": len(events), "cells": len(cells)})
        return cells

    async def get_streak_data(self, owner_id: str, now: datetime) -> StreakSummary:
        today = local_today(self._now(now), self.tz)
        events = await self.habit_logs.query_completion_dates(owner_id)
        return compute_streak((e.completed_date for e in events), today)

    async def get_monthly_stats(self, owner_id: str, now: datetime) -> MonthlyStats:
        now = self._now(now)
        completed = await self.habit_logs.count_completions(owner_id, month_start(now, self.tz))
        habit_count = await self.tasks.query_habit_count(owner_id)
        return monthly_rate(completed, habit_count, days_elapsed_in_month(now, self.tz))

    async def get_focus_chart_data(self, owner_id: str, period: Union[ChartPeriod, str],
                                   now: datetime) -> List[ChartPoint]:
        now = self._now(now)
        since = period_lower_bound(period, now, self.tz)
        sessions = await self.sessions.query_focus_sessions(owner_id, MODE_WORK, to_utc_naive(since, self.tz))
        return aggregate_chart(sessions, period, now, self.tz)

    async def get_dashboard(self, owner_id: str, period: Union[ChartPeriod, str], now: datetime,
                            days: int = DEFAULT_HEATMAP_DAYS) -> Dashboard:
        """Everything the statistics page shows, fetched concurrently."""
        heatmap, streak, monthly, chart = await gather_or_cancel(
            self.get_habit_heatmap(owner_id, now, days),
            self.get_streak_data(owner_id, now),
            self.get_monthly_stats(owner_id, now),
            self.get_focus_chart_data(owner_id, period, now),
        )
        return Dashboard(
            heatmap=heatmap,
            streak=streak,
            monthly=monthly,
            chart=with_default_template(chart, period, self._now(now), self.tz),
        )
