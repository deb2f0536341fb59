"""Course domain entity: one class meeting of the imported schedule within a given week."""
from typing import Optional

from timetable.utilities.validators import CourseInput


class Course:
    def __init__(self, course_code: str = "", course_name: str = "", teacher_name: str = "",
                 classroom: str = "", day_of_week: int = 1, week_number: Optional[int] = None,
                 period_start: int = 1, period_count: int = 1, remark: Optional[str] = None):
        self.course_code = course_code
        self.course_name = course_name
        self.teacher_name = teacher_name
        self.classroom = classroom
        self.day_of_week = day_of_week
        self.week_number = week_number
        self.period_start = period_start
        self.period_count = period_count
        self.remark = remark

    @property
    def last_period(self) -> int:
        return self.period_start + self.period_count - 1

    def __str__(self) -> str:
        parts = [f"{self.course_name} ({self.course_code})",
                 f"day {self.day_of_week}",
                 f"periods {self.period_start}-{self.last_period}"]
        if self.week_number:
            parts.append(f"week {self.week_number}")
        if self.classroom:
            parts.append(self.classroom)
        return " - ".join(parts)

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates a Course from a backend dictionary (camelCase or snake_case keys).'''
        return Course(**CourseInput.model_validate(data).model_dump())

    def to_dict(self):
        '''Converts the Course to the backend wire format.'''
        return {
            "courseCode": self.course_code,
            "courseName": self.course_name,
            "teacherName": self.teacher_name,
            "classroom": self.classroom,
            "dayOfWeek": self.day_of_week,
            "week": self.week_number,
            "sectionStart": self.period_start,
            "sectionCount": self.period_count,
            "remark": self.remark,
        }
