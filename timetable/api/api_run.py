from fastapi import FastAPI, Depends, HTTPException, Query

from datetime import datetime
from typing import Optional
import logging

from timetable.domain.Layout import Layout
from timetable.events.web_observers import start as start_event_observers, get_events as get_web_events
from timetable.infra.Layout_Repository import reading_from_layout
from timetable.infra.Schedule_Client import ScheduleClient
from timetable.infra.Schedule_Source import BaseScheduleSource, ScheduleSourceError
from timetable.logic.layout.geometry import row_spans
from timetable.logic.schedule.day_view import build_day_view
from timetable.logic.schedule.week_controller import ControllerState, WeekController
from timetable.utilities.constants import DATE_FORMAT, DAYS

# Logging
logger = logging.getLogger("timetable_app")

# Initialize FastAPI app
app = FastAPI(title="Timetable Viewer API")

# Process-wide collaborators, created on first use
_layout: Optional[Layout] = None
_source: Optional[BaseScheduleSource] = None
_controller: Optional[WeekController] = None


@app.on_event("startup")
def _startup_web_observers():
    """Register event bus subscribers for web messages when the app starts."""
    start_event_observers()
    logger.info("Web observers for schedule events started")


# -------------------- Dependencies --------------------
def get_layout() -> Layout:
    global _layout
    if _layout is None:
        _layout = reading_from_layout()
    return _layout


def get_source() -> BaseScheduleSource:
    global _source
    if _source is None:
        _source = ScheduleClient()
    return _source


def get_controller(source: BaseScheduleSource = Depends(get_source)) -> WeekController:
    global _controller
    if _controller is None:
        _controller = WeekController(source)
    return _controller


# -------------------- Helpers --------------------
def _schedule_payload(controller: WeekController, layout: Layout):
    """Controller state plus the placed rectangles of the cached week."""
    rects = controller.layout_courses(layout)
    payload = controller.snapshot()
    payload["count"] = len(rects)
    payload["rectangles"] = [r.to_dict() for r in rects]
    return payload


async def _started(controller: WeekController) -> WeekController:
    if controller.state is ControllerState.UNINITIALIZED:
        await controller.start()
    return controller


# -------------------- API --------------------
@app.get("/api/layout")
def api_layout(layout: Layout = Depends(get_layout)):
    """Rows of the day grid with their own top/height percent (time column and background)."""
    return {
        "total_weight": layout.total_weight,
        "period_count": layout.period_count,
        "days": DAYS,
        "rows": row_spans(layout),
    }


@app.get("/api/schedule")
async def api_schedule(
    week: Optional[int] = Query(default=None, ge=1, description="Week of the term; omit for the current/selected week"),
    controller: WeekController = Depends(get_controller),
    layout: Layout = Depends(get_layout),
):
    await _started(controller)
    if week is not None:
        if week > controller.max_week:
            raise HTTPException(status_code=400, detail=f"Week must be between 1 and {controller.max_week}")
        await controller.select_week(week)
    return _schedule_payload(controller, layout)


@app.post("/api/schedule/next")
async def api_schedule_next(controller: WeekController = Depends(get_controller),
                            layout: Layout = Depends(get_layout)):
    await _started(controller)
    await controller.next_week()
    return _schedule_payload(controller, layout)


@app.post("/api/schedule/previous")
async def api_schedule_previous(controller: WeekController = Depends(get_controller),
                                layout: Layout = Depends(get_layout)):
    await _started(controller)
    await controller.previous_week()
    return _schedule_payload(controller, layout)


@app.post("/api/schedule/reset")
async def api_schedule_reset(controller: WeekController = Depends(get_controller),
                             layout: Layout = Depends(get_layout)):
    """Called after the schedule was re-imported or cleared elsewhere."""
    await controller.reset()
    return _schedule_payload(controller, layout)


@app.get("/api/schedule/day")
async def api_schedule_day(
    date: Optional[str] = Query(default=None, description=f"Day in {DATE_FORMAT} format, default today"),
    source: BaseScheduleSource = Depends(get_source),
    layout: Layout = Depends(get_layout),
):
    now = datetime.now()
    if date is None:
        day = now.date()
    else:
        try:
            day = datetime.strptime(date, DATE_FORMAT).date()
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid date (expected {DATE_FORMAT})")
    try:
        courses = await source.get_schedule_for_date(day)
    except ScheduleSourceError as e:
        logger.error("Day schedule for %s failed: %s", day, e)
        raise HTTPException(status_code=502, detail="Failed to load the schedule")
    return build_day_view(courses, day, now, layout)


@app.get("/api/events")
def api_events(
    since: Optional[int] = Query(default=None, description="Return events with id greater than this value")
):
    """
    Return recent transient messages (failed fetches) and data diagnostics (invalid entries).

    Client polling strategy:
        1. First call without 'since' to load the current backlog.
        2. Store 'next_cursor' from response.
        3. Subsequent polls: /api/events?since=<next_cursor>
    """
    return get_web_events(since)
