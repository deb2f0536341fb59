"""Single-day schedule helpers (dashboard list of today's courses).

Period clock times come from the layout row labels ("08:30 - 09:15"), so a
custom layout changes the day view as well as the grid.
"""
from __future__ import annotations
from datetime import date, datetime, time
from typing import Any, Dict, Iterable, List, Optional, Tuple

from timetable.domain.Course import Course
from timetable.domain.Layout import Layout, REFERENCE_LAYOUT

__all__ = ["FINISHED", "ONGOING", "UPCOMING", "parse_time_range", "course_time_range",
           "format_time_range", "course_status", "sort_by_period", "pick_hero_course",
           "build_day_view"]

FINISHED = "finished"
ONGOING = "ongoing"
UPCOMING = "upcoming"

TIME_FORMAT = "%H:%M"


def parse_time_range(label: str) -> Optional[Tuple[time, time]]:
    """Parse 'HH:MM - HH:MM'. Returns None for labels that are not time ranges."""
    parts = [p.strip() for p in (label or "").split("-")]
    if len(parts) != 2:
        return None
    try:
        return (datetime.strptime(parts[0], TIME_FORMAT).time(),
                datetime.strptime(parts[1], TIME_FORMAT).time())
    except ValueError:
        return None


def course_time_range(course: Course, layout: Layout = REFERENCE_LAYOUT) -> Optional[Tuple[time, time]]:
    """Start of the first period to end of the last one.

    When the last period is not in the layout the course ends with its first period.
    """
    start_row = layout.period_row(course.period_start)
    if start_row is None:
        return None
    end_row = layout.period_row(course.last_period) or start_row
    start = parse_time_range(start_row.display_label)
    end = parse_time_range(end_row.display_label)
    if start is None or end is None:
        return None
    return start[0], end[1]


def format_time_range(course: Course, layout: Layout = REFERENCE_LAYOUT) -> str:
    rng = course_time_range(course, layout)
    if rng is None:
        return ""
    return f"{rng[0].strftime(TIME_FORMAT)} - {rng[1].strftime(TIME_FORMAT)}"


def course_status(course: Course, on_day: date, now: datetime,
                  layout: Layout = REFERENCE_LAYOUT) -> str:
    today = now.date()
    if on_day != today:
        return FINISHED if on_day < today else UPCOMING
    rng = course_time_range(course, layout)
    if rng is None:
        return UPCOMING
    if now > datetime.combine(on_day, rng[1], tzinfo=now.tzinfo):
        return FINISHED
    if now < datetime.combine(on_day, rng[0], tzinfo=now.tzinfo):
        return UPCOMING
    return ONGOING


def sort_by_period(courses: Iterable[Course]) -> List[Course]:
    return sorted(courses, key=lambda c: c.period_start)


def pick_hero_course(courses: Iterable[Course], on_day: date, now: datetime,
                     layout: Layout = REFERENCE_LAYOUT) -> Optional[Course]:
    """The course to feature: first of the day for other dates, else the next one to start.

    When every course of today has already started, the last one is returned.
    """
    ordered = sort_by_period(courses)
    if not ordered:
        return None
    if on_day != now.date():
        return ordered[0]
    current = now.time().replace(second=0, microsecond=0, tzinfo=None)
    for course in ordered:
        rng = course_time_range(course, layout)
        if rng is not None and rng[0] > current:
            return course
    return ordered[-1]


def build_day_view(courses: Iterable[Course], on_day: date, now: datetime,
                   layout: Layout = REFERENCE_LAYOUT) -> Dict[str, Any]:
    ordered = sort_by_period(courses)
    hero = pick_hero_course(ordered, on_day, now, layout)
    items = []
    for course in ordered:
        item = course.to_dict()
        item['time'] = format_time_range(course, layout)
        item['status'] = course_status(course, on_day, now, layout)
        items.append(item)
    return {
        'date': on_day.isoformat(),
        'is_today': on_day == now.date(),
        'count': len(items),
        'courses': items,
        'hero': hero.to_dict() if hero is not None else None,
    }
