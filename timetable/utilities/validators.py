"""
Input validation schemas using Pydantic for data coming from the schedule backend
and from layout configuration files.
"""
from pydantic import BaseModel, Field, AliasChoices, field_validator, model_validator
from typing import Any, List, Literal, Optional


class CourseInput(BaseModel):
    """Schema for one course entry as returned by the schedule backend.

    Day and period ranges are deliberately not constrained here: malformed
    entries must reach the placement engine so they can be reported one by one
    instead of failing the whole response. A missing or null day/period becomes
    0, which placement rejects as unresolvable.
    """
    course_code: str = Field("", validation_alias=AliasChoices("courseCode", "course_code"))
    course_name: str = Field("", validation_alias=AliasChoices("courseName", "course_name"))
    teacher_name: str = Field("", validation_alias=AliasChoices("teacherName", "teacher_name"))
    classroom: str = ""
    day_of_week: int = Field(0, validation_alias=AliasChoices("dayOfWeek", "day_of_week"))
    week_number: Optional[int] = Field(None, validation_alias=AliasChoices("week", "weekNumber", "week_number"))
    period_start: int = Field(0, validation_alias=AliasChoices("sectionStart", "periodStart", "period_start"))
    period_count: int = Field(1, validation_alias=AliasChoices("sectionCount", "periodCount", "period_count"))
    remark: Optional[str] = None

    @field_validator('course_code', 'course_name', 'teacher_name', 'classroom', mode='before')
    @classmethod
    def none_to_empty(cls, v):
        """Backend sends null for unknown display fields."""
        if v is None:
            return ""
        return str(v).strip()

    @field_validator('day_of_week', 'period_start', 'period_count', mode='before')
    @classmethod
    def none_to_unresolvable(cls, v):
        if v is None:
            return 0
        return v


class LayoutRowInput(BaseModel):
    """Schema for one row of a layout configuration file."""
    kind: Literal["period", "break"]
    period_index: Optional[int] = Field(None, ge=1)
    weight: float = Field(..., gt=0)
    display_label: str = ""
    name: str = ""

    @model_validator(mode='after')
    def check_period_index(self):
        if self.kind == "period" and self.period_index is None:
            raise ValueError('Period rows need a period_index')
        if self.kind == "break" and self.period_index is not None:
            raise ValueError('Break rows cannot carry a period_index')
        return self


class LayoutInput(BaseModel):
    """Schema for a whole layout file: a non-empty list of rows."""
    rows: List[LayoutRowInput] = Field(..., min_length=1)


class RestBeanInput(BaseModel):
    """Envelope used by every schedule backend response."""
    code: int
    data: Any = None
    message: Optional[str] = None
