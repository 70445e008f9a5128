# core/stats.py
"""
Aggregations behind the statistics page: streaks, the completion heatmap,
the monthly completion rate and the focus-minutes chart.

Everything here is synchronous and works on rows that were already fetched.
"now" and the time zone are always passed in, never read from the system clock.
"""
import math
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Callable, Dict, Iterable, List, Mapping, Sequence, Union

import numpy as np
import pandas as pd

from core.constants import HEATMAP_THRESHOLDS, MODE_WORK, QUARTER_LABELS, WEEKDAY_LABELS
from core.models import ChartPoint, FocusSession, HeatmapCell, MonthlyStats, StreakSummary
from core.time_utils import DateLike, days_in_month, local_midnight, local_today, parse_date, to_local


# ====== STREAKS ======
def compute_streak(dates: Iterable[DateLike], today: date) -> StreakSummary:
    """Current and longest run of consecutive days with at least one completion.

    A date counts once no matter how many habits were completed on it. The
    current run only survives if the latest completion is today or yesterday.
    """
    unique = sorted({parse_date(d) for d in dates}, reverse=True)
    if not unique:
        return StreakSummary(current_streak=0, max_streak=0)

    current = 0
    if unique[0] in (today, today - timedelta(days=1)):
        current = 1
        for prev, curr in zip(unique, unique[1:]):
            if (prev - curr).days != 1:
                break
            current += 1

    longest, run = 1, 1
    for prev, curr in zip(unique, unique[1:]):
        if (prev - curr).days == 1:
            run += 1
            longest = max(longest, run)
        else:
            run = 1

    return StreakSummary(current_streak=current, max_streak=max(longest, current))


# ====== HEATMAP ======
def heatmap_level(count: int) -> int:
    return int(np.digitize(count, HEATMAP_THRESHOLDS))

def count_by_date(dates: Iterable[DateLike]) -> Dict[date, int]:
    return dict(Counter(parse_date(d) for d in dates))

def build_heatmap(counts: Mapping[DateLike, int], today: date, days: int) -> List[HeatmapCell]:
    """Dense oldest-first cells for `today - days` .. `today`, missing days count 0."""
    if days < 0:
        raise ValueError(f"heatmap window must be >= 0 days, got {days}")
    by_day = {parse_date(d): int(c) for d, c in counts.items()}
    window = [today - timedelta(days=i) for i in range(days, -1, -1)]
    values = [by_day.get(d, 0) for d in window]
    return [HeatmapCell(date=d, count=c, level=heatmap_level(c)) for d, c in zip(window, values)]


# ====== MONTHLY RATE ======
def monthly_rate(completed: int, habit_count: int, days_elapsed: int) -> MonthlyStats:
    """Completions against habit_count x days_elapsed.

    Not clamped at 100: make-up entries can push the rate above it.
    Rounds half up.
    """
    total = habit_count * days_elapsed
    rate = int(math.floor(completed / total * 100 + 0.5)) if total > 0 else 0
    return MonthlyStats(completed=completed, total=total, rate=rate)


# ====== CHART ======
class ChartPeriod(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class PeriodRule:
    first_day: Callable[[date], date]          # local today -> first day included
    bucket_key: Callable[[datetime], str]      # local timestamp -> label
    labels: Callable[[date], Sequence[str]]    # local today -> canonical labels, in order


def _week_of_month(day: int) -> str:
    return f"Week {math.ceil(day / 7)}"


PERIOD_RULES: Dict[ChartPeriod, PeriodRule] = {
    ChartPeriod.DAY: PeriodRule(
        first_day=lambda today: today,
        bucket_key=lambda at: f"{at.hour:02d}:00",
        labels=lambda today: tuple(f"{h:02d}:00" for h in range(24)),
    ),
    ChartPeriod.WEEK: PeriodRule(
        first_day=lambda today: today - timedelta(days=6),
        bucket_key=lambda at: WEEKDAY_LABELS[at.weekday()],
        labels=lambda today: WEEKDAY_LABELS,
    ),
    ChartPeriod.MONTH: PeriodRule(
        first_day=lambda today: today.replace(day=1),
        bucket_key=lambda at: _week_of_month(at.day),
        labels=lambda today: tuple(_week_of_month(d) for d in range(1, days_in_month(today) + 1, 7)),
    ),
    ChartPeriod.YEAR: PeriodRule(
        first_day=lambda today: date(today.year, 1, 1),
        bucket_key=lambda at: QUARTER_LABELS[(at.month - 1) // 3],
        labels=lambda today: QUARTER_LABELS,
    ),
}


def coerce_period(period: Union[ChartPeriod, str]) -> ChartPeriod:
    try:
        return ChartPeriod(period)
    except ValueError:
        allowed = ", ".join(p.value for p in ChartPeriod)
        raise ValueError(f"unknown chart period {period!r} (expected one of: {allowed})")

def period_lower_bound(period: Union[ChartPeriod, str], now: datetime, tz) -> datetime:
    rule = PERIOD_RULES[coerce_period(period)]
    return local_midnight(rule.first_day(local_today(now, tz)), tz)

def period_labels(period: Union[ChartPeriod, str], now: datetime, tz) -> Sequence[str]:
    rule = PERIOD_RULES[coerce_period(period)]
    return rule.labels(local_today(now, tz))

def aggregate_chart(sessions: Iterable[FocusSession], period: Union[ChartPeriod, str],
                    now: datetime, tz) -> List[ChartPoint]:
    """Sum work minutes per bucket from the period's lower bound on.

    Only populated buckets are returned, in canonical label order.
    """
    period = coerce_period(period)
    rule = PERIOD_RULES[period]
    start = period_lower_bound(period, now, tz)

    rows = []
    for s in sessions:
        if s.mode != MODE_WORK:
            continue
        at = to_local(s.completed_at, tz)
        if at < start:
            continue
        rows.append({"bucket": rule.bucket_key(at), "minutes": int(s.duration_minutes)})
    if not rows:
        return []

    totals = pd.DataFrame(rows).groupby("bucket")["minutes"].sum()
    order = [label for label in period_labels(period, now, tz) if label in totals.index]
    return [ChartPoint(bucket_label=label, value=int(totals[label])) for label in order]

def default_chart_template(period: Union[ChartPeriod, str], now: datetime, tz) -> List[ChartPoint]:
    return [ChartPoint(bucket_label=label, value=0) for label in period_labels(period, now, tz)]

def with_default_template(points: List[ChartPoint], period: Union[ChartPeriod, str],
                          now: datetime, tz) -> List[ChartPoint]:
    """Keep charts from rendering blank: an empty result becomes the zero template."""
    if points:
        return points
    return default_chart_template(period, now, tz)
