import unittest
from datetime import date

import httpx

from timetable.events.Event_Bus import EventBus, SCHEDULE_FETCH_FAILED, SCHEDULE_INVALID_ENTRY
from timetable.infra.Schedule_Client import ScheduleClient
from timetable.infra.Schedule_Source import ScheduleSourceError
from timetable.logic.schedule.week_controller import ControllerState, WeekController

COURSE = {
    "courseName": "Math", "courseCode": "MATH101", "teacherName": "Dr. Li",
    "dayOfWeek": 1, "week": 7, "sectionStart": 3, "sectionCount": 2,
    "classroom": "A101", "remark": None,
}


class TestScheduleClient(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.requests = []
        self.routes = {}
        self.bus = EventBus()
        self.events = []
        for name in (SCHEDULE_FETCH_FAILED, SCHEDULE_INVALID_ENTRY):
            self.bus.subscribe(name, lambda n, p: self.events.append((n, p)))
        transport = httpx.MockTransport(self._handle)
        self.client = ScheduleClient(client=httpx.AsyncClient(transport=transport, base_url="http://backend"),
                                     bus=self.bus)

    async def asyncTearDown(self):
        await self.client.aclose()

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.routes.get((request.method, request.url.path), (404, {"code": 404}))
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    async def test_status(self):
        self.routes[("GET", "/schedule/status")] = (200, {"code": 200, "data": True})
        self.assertTrue(await self.client.is_schedule_imported())
        self.routes[("GET", "/schedule/status")] = (200, {"code": 200, "data": False})
        self.assertFalse(await self.client.is_schedule_imported())

    async def test_week_with_and_without_parameter(self):
        self.routes[("GET", "/schedule/week")] = (200, {"code": 200, "data": [COURSE]})
        courses = await self.client.get_schedule_for_week()
        self.assertEqual(len(courses), 1)
        self.assertEqual(courses[0].week_number, 7)
        self.assertEqual(courses[0].period_start, 3)
        self.assertEqual(courses[0].period_count, 2)
        self.assertNotIn("week", self.requests[-1].url.params)
        await self.client.get_schedule_for_week(7)
        self.assertEqual(self.requests[-1].url.params["week"], "7")

    async def test_null_data_is_empty_list(self):
        self.routes[("GET", "/schedule/week")] = (200, {"code": 200, "data": None})
        self.assertEqual(await self.client.get_schedule_for_week(2), [])

    async def test_date(self):
        self.routes[("GET", "/schedule/date")] = (200, {"code": 200, "data": [COURSE]})
        courses = await self.client.get_schedule_for_date(date(2025, 9, 1))
        self.assertEqual(courses[0].course_name, "Math")
        self.assertEqual(self.requests[-1].url.params["date"], "2025-09-01")

    async def test_error_code_raises(self):
        self.routes[("GET", "/schedule/week")] = (200, {"code": 401, "message": "login required"})
        with self.assertRaises(ScheduleSourceError) as ctx:
            await self.client.get_schedule_for_week(1)
        self.assertIn("login required", str(ctx.exception))

    async def test_http_error_raises(self):
        self.routes[("GET", "/schedule/week")] = (500, {"code": 500})
        with self.assertRaises(ScheduleSourceError):
            await self.client.get_schedule_for_week(1)

    async def test_malformed_payloads_raise(self):
        self.routes[("GET", "/schedule/week")] = (200, "<html>oops</html>")
        with self.assertRaises(ScheduleSourceError):
            await self.client.get_schedule_for_week(1)
        self.routes[("GET", "/schedule/week")] = (200, {"code": 200, "data": {"not": "a list"}})
        with self.assertRaises(ScheduleSourceError):
            await self.client.get_schedule_for_week(1)
        self.routes[("GET", "/schedule/week")] = (200, {"code": 200, "data": "not a list"})
        with self.assertRaises(ScheduleSourceError):
            await self.client.get_schedule_for_week(1)

    async def test_null_period_keeps_the_other_entries(self):
        broken = dict(COURSE, courseName="Physics", sectionStart=None)
        self.routes[("GET", "/schedule/week")] = (200, {"code": 200, "data": [COURSE, broken]})
        courses = await self.client.get_schedule_for_week(7)
        self.assertEqual([c.course_name for c in courses], ["Math", "Physics"])
        self.assertEqual(courses[1].period_start, 0)

    async def test_missing_and_null_fields_are_unresolvable(self):
        self.routes[("GET", "/schedule/week")] = (200, {"code": 200, "data": [
            {"courseName": "x"},
            dict(COURSE, dayOfWeek=None, sectionCount=None),
        ]})
        first, second = await self.client.get_schedule_for_week(7)
        self.assertEqual((first.day_of_week, first.period_start, first.period_count), (0, 0, 1))
        self.assertEqual((second.day_of_week, second.period_count), (0, 0))

    async def test_unreadable_entry_is_skipped_and_reported(self):
        self.routes[("GET", "/schedule/week")] = (200, {"code": 200, "data": [
            COURSE, dict(COURSE, courseName="Art", dayOfWeek="Monday"), "garbage",
        ]})
        courses = await self.client.get_schedule_for_week(7)
        self.assertEqual([c.course_name for c in courses], ["Math"])
        reported = [p for n, p in self.events if n == SCHEDULE_INVALID_ENTRY]
        self.assertEqual(len(reported), 2)
        self.assertEqual(reported[0]["course"]["courseName"], "Art")
        self.assertFalse(reported[0]["clamped"])

    async def test_controller_renders_the_valid_entries(self):
        broken = dict(COURSE, courseName="Physics", dayOfWeek=3, sectionStart=None)
        self.routes[("GET", "/schedule/status")] = (200, {"code": 200, "data": True})
        self.routes[("GET", "/schedule/week")] = (200, {"code": 200, "data": [COURSE, broken]})
        ctrl = WeekController(self.client, bus=self.bus)
        await ctrl.start()
        self.assertIs(ctrl.state, ControllerState.LOADED)
        self.assertEqual(ctrl.week, 7)
        rects = ctrl.layout_courses()
        self.assertEqual([r.course.course_name for r in rects], ["Math"])
        self.assertEqual([n for n, p in self.events], [SCHEDULE_INVALID_ENTRY])
        self.assertEqual(self.events[0][1]["course"].course_name, "Physics")

    async def test_import_and_clear(self):
        self.routes[("POST", "/schedule/import")] = (200, {"code": 200, "data": None})
        self.routes[("DELETE", "/schedule")] = (200, {"code": 200, "data": None})
        self.assertTrue(await self.client.import_schedule("Term 1", date(2025, 9, 1), b"\x89PNG"))
        body = self.requests[-1].read()
        self.assertIn(b"Term 1", body)
        self.assertIn(b"2025-09-01", body)
        self.assertTrue(await self.client.clear_schedule())

    async def test_import_failure_returns_false(self):
        self.routes[("POST", "/schedule/import")] = (200, {"code": 500, "message": "OCR failed"})
        self.assertFalse(await self.client.import_schedule("Term 1", date(2025, 9, 1), b""))


if __name__ == '__main__':
    unittest.main()
