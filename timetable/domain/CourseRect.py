"""CourseRect: placement of one course inside the week grid, in percent of the grid size."""
from typing import List, Tuple

from timetable.domain.Course import Course
from timetable.utilities.constants import COURSE_PALETTE


class CourseRect:
    def __init__(self, course: Course, left_percent: float, width_percent: float,
                 top_percent: float, height_percent: float, color_index: int):
        self.course = course
        self.left_percent = left_percent
        self.width_percent = width_percent
        self.top_percent = top_percent
        self.height_percent = height_percent
        self.color_index = color_index

    def colors(self, palette: List[Tuple[str, str]] = COURSE_PALETTE) -> Tuple[str, str]:
        '''Returns the (background, text) color pair for this course.'''
        return palette[self.color_index % len(palette)]

    def __str__(self) -> str:
        return (f"{self.course.course_name} @ left={self.left_percent:.3f}% top={self.top_percent:.3f}% "
                f"w={self.width_percent:.3f}% h={self.height_percent:.3f}% color={self.color_index}")

    __repr__ = __str__

    def to_dict(self):
        background, text = self.colors()
        return {
            "left": self.left_percent,
            "width": self.width_percent,
            "top": self.top_percent,
            "height": self.height_percent,
            "color_index": self.color_index,
            "background": background,
            "color": text,
            "course": self.course.to_dict(),
        }
