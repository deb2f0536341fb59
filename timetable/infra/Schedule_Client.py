"""HTTP schedule collaborator speaking the backend's {code, data, message} envelope."""
from __future__ import annotations
import logging
from datetime import date
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from timetable.domain.Course import Course
from timetable.events.Event_Bus import EventBus
from timetable.events.event_helpers import publish_invalid_entry
from timetable.infra.Schedule_Source import BaseScheduleSource, ScheduleSourceError
from timetable.utilities.config import SCHEDULE_API_BASE_URL, SCHEDULE_API_TOKEN, SCHEDULE_API_TIMEOUT
from timetable.utilities.constants import DATE_FORMAT
from timetable.utilities.validators import RestBeanInput

logger = logging.getLogger(__name__)

SUCCESS_CODE = 200


class ScheduleClient(BaseScheduleSource):
    def __init__(self, base_url: str = SCHEDULE_API_BASE_URL, token: str = SCHEDULE_API_TOKEN,
                 timeout: float = SCHEDULE_API_TIMEOUT, client: Optional[httpx.AsyncClient] = None,
                 bus: Optional[EventBus] = None):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._client = client or httpx.AsyncClient(base_url=base_url, headers=headers, timeout=timeout)
        self._event_bus = bus

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        """Send a request and unwrap the envelope. Raises ScheduleSourceError."""
        try:
            resp = await self._client.request(method, url, **kwargs)
            resp.raise_for_status()
            bean = RestBeanInput.model_validate(resp.json())
        except httpx.HTTPError as e:
            raise ScheduleSourceError(f"{method} {url} failed: {e}") from e
        except ValueError as e:  # invalid JSON or envelope
            raise ScheduleSourceError(f"Malformed response from {url}: {e}") from e
        if bean.code != SUCCESS_CODE:
            raise ScheduleSourceError(bean.message or f"{method} {url} returned code {bean.code}")
        return bean.data

    def _courses(self, data: Any) -> List[Course]:
        """Converts the entries one by one; an entry that cannot be read is left out and reported."""
        if data is None:
            return []
        if not isinstance(data, list):
            raise ScheduleSourceError(f"Expected a list of courses, got {type(data).__name__}")
        courses = []
        for item in data:
            try:
                courses.append(Course.from_dict(item))
            except ValidationError as e:
                logger.warning("Skipping unreadable course entry %r: %s", item, e)
                publish_invalid_entry(item, f"Unreadable course entry: {e}", bus=self._event_bus)
        return courses

    async def is_schedule_imported(self) -> bool:
        return bool(await self._request("GET", "/schedule/status"))

    async def get_schedule_for_week(self, week: Optional[int] = None) -> List[Course]:
        # No week parameter -> the backend answers with the week containing today
        params = {"week": week} if week is not None else None
        courses = self._courses(await self._request("GET", "/schedule/week", params=params))
        logger.debug("Fetched %d courses for week %s", len(courses), week if week is not None else "current")
        return courses

    async def get_schedule_for_date(self, day: date) -> List[Course]:
        data = await self._request("GET", "/schedule/date", params={"date": day.strftime(DATE_FORMAT)})
        return self._courses(data)

    async def import_schedule(self, term_name: str, start_date: date, image: bytes) -> bool:
        form = {"termName": term_name, "startDate": start_date.strftime(DATE_FORMAT)}
        files = {"file": ("schedule.png", image, "image/png")}
        try:
            await self._request("POST", "/schedule/import", data=form, files=files)
        except ScheduleSourceError as e:
            logger.error("Schedule import failed: %s", e)
            return False
        logger.info("Schedule imported for term %s", term_name)
        return True

    async def clear_schedule(self) -> bool:
        try:
            await self._request("DELETE", "/schedule")
        except ScheduleSourceError as e:
            logger.error("Clearing schedule failed: %s", e)
            return False
        return True
