"""Event helper utilities.

This module provides helper functions for publishing schedule-related events.
Each helper takes the bus explicitly so that components holding their own bus
(tests, embedded controllers) publish to it instead of the global one.

Quick import:
    from timetable.events.event_helpers import (
        publish_state_changed, publish_fetch_failed, publish_invalid_entry,
        publish_response_discarded
    )

"""
from __future__ import annotations
from typing import Any, Optional
from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS,
    SCHEDULE_STATE_CHANGED, SCHEDULE_FETCH_FAILED, SCHEDULE_INVALID_ENTRY,
    SCHEDULE_RESPONSE_DISCARDED
)

__all__ = [
    'publish_state_changed', 'publish_fetch_failed', 'publish_invalid_entry',
    'publish_response_discarded'
]


def publish_state_changed(state: str, previous: str, week: Optional[int],
                          bus: Optional[EventBus] = None):
    """Publish a schedule.state_changed event."""
    (bus or GLOBAL_EVENT_BUS).publish(SCHEDULE_STATE_CHANGED, {
        'state': state,
        'previous': previous,
        'week': week
    })


def publish_fetch_failed(week: Optional[int], message: str, error: Any,
                         bus: Optional[EventBus] = None):
    """Publish a schedule.fetch_failed event with a user-visible message."""
    (bus or GLOBAL_EVENT_BUS).publish(SCHEDULE_FETCH_FAILED, {
        'week': week,
        'message': message,
        'error': str(error)
    })


def publish_invalid_entry(course: Any, reason: str, clamped: bool = False,
                          bus: Optional[EventBus] = None):
    """Publish a schedule.invalid_entry diagnostic.

    clamped=False means the entry was left out of the rendered set,
    clamped=True means it was rendered with its height cut at the last row.
    """
    (bus or GLOBAL_EVENT_BUS).publish(SCHEDULE_INVALID_ENTRY, {
        'course': course,
        'reason': reason,
        'clamped': clamped
    })


def publish_response_discarded(week: Optional[int], token: int,
                               bus: Optional[EventBus] = None):
    """Publish a schedule.response_discarded event for a superseded fetch."""
    (bus or GLOBAL_EVENT_BUS).publish(SCHEDULE_RESPONSE_DISCARDED, {
        'week': week,
        'token': token
    })
