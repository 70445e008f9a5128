# core/constants.py
MODE_WORK = "work"
MODE_BREAK = "break"
ALLOWED_MODES = {MODE_WORK, MODE_BREAK}

CATEGORIES = ("Health", "Work", "Personal", "Social", "Study")
FREQUENCIES = {"daily", "weekly", "custom"}
ALL_DAY = "All day"

# heatmap level breakpoints: 0 -> 0, [1,3) -> 1, [3,5) -> 2, >=5 -> 3
HEATMAP_THRESHOLDS = (1, 3, 5)

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
QUARTER_LABELS = ("Q1", "Q2", "Q3", "Q4")

XP_PER_LEVEL = 1200
XP_PER_FOCUS_SESSION = 40
RANKS = (
    "Novice Explorer",
    "Habit Apprentice",
    "Rising Practitioner",
    "Seasoned Keeper",
    "Habit Master",
    "Legendary Grandmaster",
)
