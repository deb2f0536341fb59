from typing import Final

DATE_FORMAT: Final[str] = "%Y-%m-%d"
DAYS_PER_WEEK: Final[int] = 7
DAYS: Final[list[str]] = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
FIRST_WEEK: Final[int] = 1
DEFAULT_MAX_WEEK: Final[int] = 20

# Reference school day: 11 periods, lunch and midday rest between periods 4 and 5
DEFAULT_LAYOUT: Final[list[dict]] = [
    {"kind": "period", "period_index": 1, "weight": 60, "display_label": "08:30 - 09:15"},
    {"kind": "period", "period_index": 2, "weight": 60, "display_label": "09:20 - 10:05"},
    {"kind": "period", "period_index": 3, "weight": 60, "display_label": "10:20 - 11:05"},
    {"kind": "period", "period_index": 4, "weight": 60, "display_label": "11:10 - 11:55"},
    {"kind": "break", "name": "Lunch", "weight": 30, "display_label": "12:00 - 12:30"},
    {"kind": "break", "name": "Rest", "weight": 30, "display_label": "12:40 - 14:10"},
    {"kind": "period", "period_index": 5, "weight": 60, "display_label": "14:30 - 15:15"},
    {"kind": "period", "period_index": 6, "weight": 60, "display_label": "15:20 - 16:05"},
    {"kind": "period", "period_index": 7, "weight": 60, "display_label": "16:20 - 17:05"},
    {"kind": "period", "period_index": 8, "weight": 60, "display_label": "17:10 - 17:55"},
    {"kind": "period", "period_index": 9, "weight": 60, "display_label": "19:30 - 20:15"},
    {"kind": "period", "period_index": 10, "weight": 60, "display_label": "20:20 - 21:05"},
    {"kind": "period", "period_index": 11, "weight": 60, "display_label": "21:10 - 21:55"},
]

# (background, text) pairs, indexed by the course color hash
COURSE_PALETTE: Final[list[tuple[str, str]]] = [
    ("#e6f7ff", "#1890ff"),
    ("#f9f0ff", "#722ed1"),
    ("#fff7e6", "#fa8c16"),
    ("#f6ffed", "#52c41a"),
    ("#fff1f0", "#f5222d"),
    ("#e6fffb", "#13c2c2"),
    ("#f0f5ff", "#2f54eb"),
    ("#fffbe6", "#faad14"),
]

FETCH_FAILED_MESSAGE: Final[str] = "Failed to load the schedule"
STATUS_FAILED_MESSAGE: Final[str] = "Could not determine whether a schedule is imported"
