"""Course placement: turns course entries into rectangles of the week grid.

Horizontal placement comes from the day of week (seven equal columns),
vertical placement from the geometry helpers. Colors are picked by hashing
the course name so that a course keeps its color across weeks and re-renders
without a stored assignment table.
"""
from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Tuple

from timetable.domain.Course import Course
from timetable.domain.CourseRect import CourseRect
from timetable.domain.Layout import Layout, REFERENCE_LAYOUT
from timetable.events.Event_Bus import EventBus
from timetable.events.event_helpers import publish_invalid_entry
from timetable.logic.layout.geometry import PlacementError, top_percent, height_percent, runs_past_end
from timetable.utilities.constants import COURSE_PALETTE, DAYS_PER_WEEK

logger = logging.getLogger(__name__)

__all__ = ["InvalidDay", "DAY_WIDTH_PERCENT", "course_name_hash", "color_index",
           "horizontal_span", "place_course", "place_courses"]

DAY_WIDTH_PERCENT = 100 / DAYS_PER_WEEK


class InvalidDay(PlacementError):
    def __init__(self, day_of_week: int):
        self.day_of_week = day_of_week
        super().__init__(f"Day of week must be 1..{DAYS_PER_WEEK}, got {day_of_week}")


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def course_name_hash(name: str) -> int:
    """Signed 32-bit polynomial (base 31) hash over the UTF-16 code units of name."""
    acc = 0
    data = name.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        acc = _to_int32(code + ((acc << 5) - acc))
    return acc


def color_index(name: str, palette_size: int = len(COURSE_PALETTE)) -> int:
    if palette_size < 1:
        raise ValueError(f"Palette size must be positive: {palette_size}")
    return abs(course_name_hash(name)) % palette_size


def horizontal_span(day_of_week: int) -> Tuple[float, float]:
    """(left, width) percent of the column for day_of_week, Monday = 1."""
    if not isinstance(day_of_week, int) or not 1 <= day_of_week <= DAYS_PER_WEEK:
        raise InvalidDay(day_of_week)
    return (day_of_week - 1) * DAY_WIDTH_PERCENT, DAY_WIDTH_PERCENT


def place_course(course: Course, layout: Layout = REFERENCE_LAYOUT,
                 palette_size: int = len(COURSE_PALETTE)) -> CourseRect:
    '''Places one course. Raises InvalidDay or InvalidPeriod for malformed entries.'''
    left, width = horizontal_span(course.day_of_week)
    top = top_percent(course.period_start, layout)
    height = height_percent(course.period_start, course.period_count, layout)
    return CourseRect(course, left, width, top, height, color_index(course.course_name, palette_size))


def place_courses(courses: Iterable[Course], layout: Layout = REFERENCE_LAYOUT,
                  palette_size: int = len(COURSE_PALETTE),
                  bus: Optional[EventBus] = None) -> List[CourseRect]:
    '''Places every course, leaving out (and reporting) the ones that cannot be resolved.

    Overlapping rectangles are returned as they are.
    '''
    rects: List[CourseRect] = []
    for course in courses:
        try:
            rect = place_course(course, layout, palette_size)
        except PlacementError as e:
            logger.warning("Skipping course %s: %s", course, e)
            publish_invalid_entry(course, str(e), bus=bus)
            continue
        if runs_past_end(course.period_start, course.period_count, layout):
            reason = f"Period {course.last_period} is past the last period ({layout.period_count})"
            logger.warning("Clamping course %s: %s", course, reason)
            publish_invalid_entry(course, reason, clamped=True, bus=bus)
        rects.append(rect)
    return rects
