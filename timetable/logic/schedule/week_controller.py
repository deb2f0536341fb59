"""Week fetch controller: which week is loaded, and whether a fetch is needed.

The controller owns a single-slot cache (last fetched week + its courses).
Selecting the cached week again is served without I/O, selecting a week whose
fetch is already running joins that fetch, anything else issues exactly one
call to the schedule source.

Every fetch carries a request token. A reset or a newer selection bumps the
token, and a response whose token is no longer current is dropped instead
of overwriting the state of the newer request.

States:
    UNINITIALIZED -> CHECKING_AVAILABILITY -> NO_SCHEDULE_IMPORTED
                                           -> LOADING -> LOADED | WEEK_UNKNOWN
"""
from __future__ import annotations
import asyncio
import logging
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from timetable.domain.Course import Course
from timetable.domain.CourseRect import CourseRect
from timetable.domain.Layout import Layout, REFERENCE_LAYOUT
from timetable.events.Event_Bus import EventBus, GLOBAL_EVENT_BUS
from timetable.events.event_helpers import (
    publish_state_changed, publish_fetch_failed, publish_response_discarded
)
from timetable.infra.Schedule_Source import BaseScheduleSource
from timetable.logic.layout.placement import place_courses
from timetable.utilities.config import MAX_WEEK
from timetable.utilities.constants import FETCH_FAILED_MESSAGE, FIRST_WEEK, STATUS_FAILED_MESSAGE

logger = logging.getLogger(__name__)

__all__ = ["ControllerState", "WeekCache", "WeekController"]


class ControllerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    CHECKING_AVAILABILITY = "checking_availability"
    NO_SCHEDULE_IMPORTED = "no_schedule_imported"
    LOADING = "loading"
    LOADED = "loaded"
    # current-week fetch returned nothing to infer the week from
    WEEK_UNKNOWN = "week_unknown"


_SETTLED_STATES = (ControllerState.LOADED, ControllerState.WEEK_UNKNOWN)
_INACTIVE_STATES = (ControllerState.UNINITIALIZED, ControllerState.CHECKING_AVAILABILITY,
                    ControllerState.NO_SCHEDULE_IMPORTED)


class WeekCache:
    """Last fetched week (None = unset), its courses and their placement.

    The placement is kept per layout until the next store or clear, so the
    diagnostics of malformed entries are published once per fetched week.
    """

    def __init__(self):
        self.week: Optional[int] = None
        self.courses: List[Course] = []
        self._placed: Optional[Tuple[Layout, List[CourseRect]]] = None

    def store(self, week: Optional[int], courses: List[Course]):
        self.week = week
        self.courses = courses
        self._placed = None

    def clear(self):
        self.week = None
        self.courses = []
        self._placed = None

    def placed(self, layout: Layout) -> Optional[List[CourseRect]]:
        if self._placed is not None and self._placed[0] is layout:
            return self._placed[1]
        return None

    def keep_placed(self, layout: Layout, rects: List[CourseRect]):
        self._placed = (layout, rects)

    def matches(self, week: Optional[int]) -> bool:
        return week is not None and week == self.week

    def __str__(self) -> str:
        return f"WeekCache(week={self.week}, courses={len(self.courses)})"

    __repr__ = __str__


class _PendingFetch:
    def __init__(self, token: int, week: Optional[int], task: asyncio.Future):
        self.token = token
        self.week = week
        self.task = task


class WeekController:
    def __init__(self, source: BaseScheduleSource, max_week: int = MAX_WEEK,
                 bus: Optional[EventBus] = None):
        self._source = source
        self._max_week = max_week
        self._event_bus = bus or GLOBAL_EVENT_BUS
        self.cache = WeekCache()
        self._state = ControllerState.UNINITIALIZED
        self._settled_state = ControllerState.LOADED
        self._token = 0
        self._pending: Optional[_PendingFetch] = None
        # selection made while the availability check was running
        self._deferred_week: Optional[int] = None

    # --- Observer helpers -------------------------------------------------
    def set_event_bus(self, bus: EventBus):
        self._event_bus = bus
        return self

    def _set_state(self, state: ControllerState):
        previous = self._state
        self._state = state
        logger.debug("Controller %s -> %s (week=%s)", previous.value, state.value, self.cache.week)
        publish_state_changed(state.value, previous.value, self.cache.week, bus=self._event_bus)

    def _next_token(self) -> int:
        self._token += 1
        return self._token

    # --- Read side ---------------------------------------------------------
    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def week(self) -> Optional[int]:
        return self.cache.week

    @property
    def courses(self) -> List[Course]:
        return self.cache.courses

    @property
    def max_week(self) -> int:
        return self._max_week

    @property
    def selected_week(self) -> Optional[int]:
        """Week the user is looking at: the one being fetched, else the cached one."""
        if self._pending is not None and self._pending.week is not None:
            return self._pending.week
        return self.cache.week

    def snapshot(self) -> Dict[str, Any]:
        return {
            "state": self._state.value,
            "week": self.cache.week,
            "selected_week": self.selected_week,
            "loading": self._state is ControllerState.LOADING,
            "max_week": self._max_week,
        }

    def layout_courses(self, layout: Layout = REFERENCE_LAYOUT) -> List[CourseRect]:
        '''Places the cached courses; malformed entries are reported on the controller's bus
        the first time a fetched week is placed with a given layout.'''
        rects = self.cache.placed(layout)
        if rects is None:
            rects = place_courses(self.cache.courses, layout, bus=self._event_bus)
            self.cache.keep_placed(layout, rects)
        return list(rects)

    # --- Transitions --------------------------------------------------------
    async def start(self) -> ControllerState:
        '''Checks whether a schedule is imported and, if so, loads the current week
        (or the week selected while the check was running).'''
        if self._state is not ControllerState.UNINITIALIZED:
            logger.debug("Controller already started (%s)", self._state.value)
            return self._state
        return await self._check_availability()

    async def _check_availability(self) -> ControllerState:
        token = self._next_token()
        self._set_state(ControllerState.CHECKING_AVAILABILITY)
        try:
            imported = await self._source.is_schedule_imported()
        except Exception as e:
            if token != self._token:
                return self._state
            logger.error("Schedule status check failed: %s", e)
            publish_fetch_failed(None, STATUS_FAILED_MESSAGE, e, bus=self._event_bus)
            imported = False
        if token != self._token:  # reset while checking
            return self._state
        if not imported:
            self._deferred_week = None
            self._set_state(ControllerState.NO_SCHEDULE_IMPORTED)
            return self._state
        week, self._deferred_week = self._deferred_week, None
        await self._await_fetch(self._start_fetch(week))
        return self._state

    async def select_week(self, week: Optional[int] = None) -> List[Course]:
        '''Shows the given week (None = the week containing today) and returns its courses.'''
        if week is not None and week < FIRST_WEEK:
            raise ValueError(f"Week must be >= {FIRST_WEEK}, got {week}")
        if self._state is ControllerState.CHECKING_AVAILABILITY:
            logger.info("Week %s requested while checking availability, loading it afterwards", week)
            self._deferred_week = week
            return []
        if self._state in _INACTIVE_STATES:
            logger.info("Ignoring selection of week %s while %s", week, self._state.value)
            return []
        if self.cache.matches(week) and self._state in (ControllerState.LOADED, ControllerState.LOADING):
            if self._pending is not None:
                # back to the cached week before the other fetch finished
                self._next_token()
                self._pending = None
                self._set_state(ControllerState.LOADED)
            logger.debug("Week %s served from cache", week)
            return self.cache.courses
        pending = self._pending
        if pending is not None and pending.week == week:
            logger.debug("Joining in-flight fetch for week %s", week)
            return await self._await_fetch(pending.task)
        return await self._await_fetch(self._start_fetch(week))

    async def next_week(self) -> List[Course]:
        current = self.selected_week
        return await self.select_week(FIRST_WEEK if current is None else min(self._max_week, current + 1))

    async def previous_week(self) -> List[Course]:
        current = self.selected_week
        return await self.select_week(FIRST_WEEK if current is None else max(FIRST_WEEK, current - 1))

    async def reset(self) -> ControllerState:
        '''Drops the cache and any in-flight fetch, then checks availability again.'''
        logger.info("Schedule invalidated, resetting week controller")
        self._next_token()
        self._pending = None
        self._deferred_week = None
        self.cache.clear()
        self._settled_state = ControllerState.LOADED
        return await self._check_availability()

    async def import_schedule(self, term_name: str, start_date: date, image: bytes) -> bool:
        ok = await self._source.import_schedule(term_name, start_date, image)
        if ok:
            await self.reset()
        return ok

    async def clear_schedule(self) -> bool:
        ok = await self._source.clear_schedule()
        if ok:
            await self.reset()
        return ok

    # --- Fetching ------------------------------------------------------------
    def _start_fetch(self, week: Optional[int]) -> asyncio.Future:
        token = self._next_token()
        if self._state in _SETTLED_STATES:
            self._settled_state = self._state
        elif self._state is not ControllerState.LOADING:
            self._settled_state = ControllerState.LOADED
        task = asyncio.ensure_future(self._run_fetch(token, week))
        self._pending = _PendingFetch(token, week, task)
        self._set_state(ControllerState.LOADING)
        return task

    @staticmethod
    async def _await_fetch(task: asyncio.Future) -> List[Course]:
        # shielded: a cancelled caller must not cancel a fetch other callers joined
        return await asyncio.shield(task)

    async def _run_fetch(self, token: int, week: Optional[int]) -> List[Course]:
        try:
            courses = list(await self._source.get_schedule_for_week(week))
        except Exception as e:
            if token != self._token:
                logger.info("Ignoring failure of superseded fetch for week %s: %s", week, e)
                publish_response_discarded(week, token, bus=self._event_bus)
                return self.cache.courses
            self._pending = None
            logger.error("Fetching week %s failed: %s", week if week is not None else "current", e)
            publish_fetch_failed(week, FETCH_FAILED_MESSAGE, e, bus=self._event_bus)
            self._set_state(self._settled_state)
            return self.cache.courses

        if token != self._token:
            logger.info("Discarding superseded response for week %s", week)
            publish_response_discarded(week, token, bus=self._event_bus)
            return courses

        self._pending = None
        if week is not None:
            self.cache.store(week, courses)
            self._set_state(ControllerState.LOADED)
            return courses

        resolved = courses[0].week_number if courses else None
        if resolved:
            self.cache.store(resolved, courses)
            self._set_state(ControllerState.LOADED)
        else:
            logger.warning("Current-week response carries no week number (%d courses)", len(courses))
            self.cache.store(None, courses)
            self._set_state(ControllerState.WEEK_UNKNOWN)
        return courses
