"""Web-facing observers for schedule events.

This module subscribes to the event bus for:
  - schedule.fetch_failed
  - schedule.invalid_entry

and stores a lightweight in-memory ring buffer of recent events that can be
queried by the web layer (FastAPI endpoint) to show transient messages
("failed to load the schedule") and data-integrity diagnostics without a
full page reload.

Design:
  * Each event stored with an auto-increment integer id (cursor) so clients
    can request only newer events (since=<last_id_seen>).
  * A simple Lock guards the buffer; uvicorn may run endpoint code in a
    threadpool.
  * A MAX_EVENTS cap prevents unbounded memory growth.
"""
from __future__ import annotations
import logging
from typing import List, Dict, Any, Optional
from threading import Lock
from datetime import datetime, timezone

from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS, SCHEDULE_FETCH_FAILED, SCHEDULE_INVALID_ENTRY
)

logger = logging.getLogger(__name__)

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
MAX_EVENTS = 300  # keep a few hundred recent events
_started_on: List[EventBus] = []


def _record(event_name: str, payload: Any):  # signature expected by EventBus
    global _next_id
    with _lock:
        evt = {
            'id': _next_id,
            'type': event_name,
            'ts': datetime.now(timezone.utc).isoformat()
        }
        if isinstance(payload, dict):
            course = payload.get('course')
            if course is not None and hasattr(course, 'course_name'):
                evt['course_name'] = course.course_name
                evt['course_code'] = course.course_code
                evt['day_of_week'] = course.day_of_week
                evt['period_start'] = course.period_start
            for k in ('week', 'message', 'reason', 'clamped'):
                if k in payload:
                    evt[k] = payload[k]
        _events.append(evt)
        _next_id += 1
        # Trim buffer
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start(bus: Optional[EventBus] = None):
    """Idempotent start: subscribe observers once per bus."""
    bus = bus or GLOBAL_EVENT_BUS
    if any(b is bus for b in _started_on):
        return
    bus.subscribe(SCHEDULE_FETCH_FAILED, _record)
    bus.subscribe(SCHEDULE_INVALID_ENTRY, _record)
    _started_on.append(bus)
    logger.debug("Web observers subscribed")


def get_events(since: int | None = None) -> Dict[str, Any]:
    """Return events newer than 'since' (exclusive).

    If since is None, returns the last N (up to MAX_EVENTS) events.
    Response includes next_cursor (largest id) so client can poll with since=next_cursor.
    """
    with _lock:
        if since is None:
            data = list(_events)
        else:
            data = [e for e in _events if e['id'] > since]
        next_cursor = _events[-1]['id'] if _events else since or 0
    return {'events': data, 'next_cursor': next_cursor}


def clear():
    """Drop buffered events (cursor keeps increasing)."""
    with _lock:
        _events.clear()


__all__ = ['start', 'get_events', 'clear']
