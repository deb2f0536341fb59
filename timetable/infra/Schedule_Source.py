"""Abstract schedule-data collaborator consumed by the week controller."""
from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from timetable.domain.Course import Course


class ScheduleSourceError(Exception):
    """The schedule backend could not be reached or answered with an error."""


class BaseScheduleSource(ABC):
    """Interface of the schedule backend.

    Implement this to feed the controller from HTTP, a local file, a test
    double, etc. Every method is a coroutine.
    """

    @abstractmethod
    async def is_schedule_imported(self) -> bool:
        """Return True when the user has an imported schedule."""

    @abstractmethod
    async def get_schedule_for_week(self, week: Optional[int] = None) -> List[Course]:
        """Return the courses of the given week.

        Args:
            week: Week number of the term, or None for the week containing today.
        """

    @abstractmethod
    async def get_schedule_for_date(self, day: date) -> List[Course]:
        """Return the courses held on a single date."""

    @abstractmethod
    async def import_schedule(self, term_name: str, start_date: date, image: bytes) -> bool:
        """Import a schedule from an image. Returns True on success."""

    @abstractmethod
    async def clear_schedule(self) -> bool:
        """Remove the imported schedule. Returns True on success."""
