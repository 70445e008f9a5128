# core/models.py
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional


@dataclass(frozen=True)
class CompletionEvent:
    owner_id: str
    habit_id: str
    completed_date: date
    recorded_at: Optional[datetime] = None


@dataclass(frozen=True)
class FocusSession:
    owner_id: str
    duration_minutes: int
    mode: str
    completed_at: datetime  # UTC-naive, as stored


@dataclass(frozen=True)
class HeatmapCell:
    date: date
    count: int
    level: int


@dataclass(frozen=True)
class StreakSummary:
    current_streak: int
    max_streak: int


@dataclass(frozen=True)
class MonthlyStats:
    completed: int
    total: int
    rate: int


@dataclass(frozen=True)
class ChartPoint:
    bucket_label: str
    value: int


@dataclass
class Task:
    id: str
    owner_id: str
    title: str
    category: str
    time: str
    completed: bool
    icon: str = "star"
    color: str = "primary"
    frequency: str = "daily"
    selected_days: List[int] = field(default_factory=lambda: [0, 1, 2, 3, 4])
    reminder_enabled: bool = True
    reminder_time: str = "08:30"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class Profile:
    owner_id: str
    nickname: str
    email: str
    level: int = 1
    xp: int = 0
    rank: str = ""
    streak: int = 0
    max_streak: int = 0
    dark_mode: bool = True


@dataclass(frozen=True)
class Dashboard:
    heatmap: List[HeatmapCell]
    streak: StreakSummary
    monthly: MonthlyStats
    chart: List[ChartPoint]


@dataclass(frozen=True)
class TodayFocus:
    completed_count: int
    total_minutes: int
