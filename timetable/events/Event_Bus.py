"""Simple Event Bus / Observer implementation for timetable notifications.

Event names used so far:
  schedule.state_changed -> payload {"state": str, "previous": str, "week": int | None}
  schedule.fetch_failed -> payload {"week": int | None, "message": str, "error": str}
  schedule.invalid_entry -> payload {"course": Course, "reason": str, "clamped": bool}
  schedule.response_discarded -> payload {"week": int | None, "token": int}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
SCHEDULE_STATE_CHANGED = "schedule.state_changed"
SCHEDULE_FETCH_FAILED = "schedule.fetch_failed"
SCHEDULE_INVALID_ENTRY = "schedule.invalid_entry"
SCHEDULE_RESPONSE_DISCARDED = "schedule.response_discarded"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def unsubscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		try:
			self._subscribers[event_name].remove(callback)
		except (ValueError, KeyError):
			pass

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:
				logger.exception("Error delivering %s to %r", event_name, cb)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


def log_listener(event_name: str, payload: Any):
	logger.debug("[EVENT] %s: %s", event_name, payload)


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS', 'log_listener',
	'SCHEDULE_STATE_CHANGED', 'SCHEDULE_FETCH_FAILED', 'SCHEDULE_INVALID_ENTRY',
	'SCHEDULE_RESPONSE_DISCARDED',
]
