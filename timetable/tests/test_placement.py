import unittest

from timetable.domain.Course import Course
from timetable.events.Event_Bus import EventBus, SCHEDULE_INVALID_ENTRY
from timetable.logic.layout.geometry import InvalidPeriod
from timetable.logic.layout.placement import (
    InvalidDay, DAY_WIDTH_PERCENT, course_name_hash, color_index,
    horizontal_span, place_course, place_courses
)
from timetable.utilities.constants import COURSE_PALETTE


def make_course(name="Math", day=1, start=1, count=1, week=3):
    return Course(course_code=name[:4].upper(), course_name=name, teacher_name="Dr. Li",
                  classroom="A101", day_of_week=day, week_number=week,
                  period_start=start, period_count=count)


class TestColorHash(unittest.TestCase):

    def test_known_values(self):
        self.assertEqual(course_name_hash(""), 0)
        self.assertEqual(course_name_hash("A"), 65)
        self.assertEqual(course_name_hash("AB"), 66 + 65 * 31)
        self.assertEqual(course_name_hash("Math"), 2390824)
        self.assertEqual(color_index("Math"), 0)
        self.assertEqual(color_index("A"), 1)

    def test_hash_uses_utf16_code_units(self):
        # surrogate pair 0xD83D 0xDE00
        self.assertEqual(course_name_hash("\U0001F600"), 0xDE00 + 0xD83D * 31)

    def test_hash_wraps_to_signed_32_bit(self):
        name = "Introduction to Probability Theory and Mathematical Statistics"
        h = course_name_hash(name)
        self.assertGreaterEqual(h, -2 ** 31)
        self.assertLess(h, 2 ** 31)

    def test_color_is_deterministic(self):
        for name in ["Math", "Linear Algebra", "高等数学", "Physics Lab", ""]:
            first = color_index(name)
            self.assertEqual(first, color_index(name))
            self.assertTrue(0 <= first < len(COURSE_PALETTE))

    def test_custom_palette_size(self):
        self.assertEqual(color_index("Math", 3), 2390824 % 3)
        with self.assertRaises(ValueError):
            color_index("Math", 0)


class TestHorizontalSpan(unittest.TestCase):

    def test_every_day(self):
        total = 0
        for day in range(1, 8):
            left, width = horizontal_span(day)
            self.assertAlmostEqual(left, (day - 1) * 100 / 7)
            self.assertAlmostEqual(width, 100 / 7)
            total += width
        self.assertAlmostEqual(total, 100.0)

    def test_out_of_range(self):
        for day in (0, 8, -1):
            with self.assertRaises(InvalidDay):
                horizontal_span(day)


class TestPlaceCourses(unittest.TestCase):

    def setUp(self):
        self.bus = EventBus()
        self.events = []
        self.bus.subscribe(SCHEDULE_INVALID_ENTRY, lambda name, payload: self.events.append(payload))

    def test_two_monday_courses(self):
        rects = place_courses([make_course(start=1), make_course(name="Physics", start=5)], bus=self.bus)
        self.assertEqual(len(rects), 2)
        first, second = rects
        for r in rects:
            self.assertEqual(r.left_percent, 0)
            self.assertAlmostEqual(r.width_percent, 14.2857, places=3)
        self.assertEqual(first.top_percent, 0)
        self.assertAlmostEqual(second.top_percent, 41.6667, places=3)
        self.assertLessEqual(first.top_percent + first.height_percent, second.top_percent)
        self.assertEqual(self.events, [])

    def test_place_course_geometry(self):
        rect = place_course(make_course(day=5, start=4, count=2))
        self.assertAlmostEqual(rect.left_percent, 4 * DAY_WIDTH_PERCENT)
        self.assertAlmostEqual(rect.top_percent, 180 / 720 * 100)
        self.assertAlmostEqual(rect.height_percent, 25.0)
        self.assertEqual(rect.color_index, color_index("Math"))

    def test_place_course_raises(self):
        with self.assertRaises(InvalidDay):
            place_course(make_course(day=9))
        with self.assertRaises(InvalidPeriod):
            place_course(make_course(start=13))

    def test_malformed_entries_are_skipped_and_reported(self):
        good = make_course(name="Chemistry", day=2, start=3)
        courses = [make_course(day=0), good, make_course(start=12), make_course(count=0), make_course(day=8)]
        rects = place_courses(courses, bus=self.bus)
        self.assertEqual([r.course for r in rects], [good])
        self.assertEqual(len(self.events), 4)
        self.assertTrue(all(not e['clamped'] for e in self.events))
        self.assertIs(self.events[0]['course'], courses[0])

    def test_overflowing_entry_is_clamped_and_reported(self):
        rects = place_courses([make_course(start=11, count=3)], bus=self.bus)
        self.assertEqual(len(rects), 1)
        self.assertAlmostEqual(rects[0].height_percent, 60 / 720 * 100)
        self.assertEqual(len(self.events), 1)
        self.assertTrue(self.events[0]['clamped'])

    def test_overlaps_pass_through(self):
        rects = place_courses([make_course(name="Math"), make_course(name="Art")], bus=self.bus)
        self.assertEqual(len(rects), 2)
        self.assertEqual(rects[0].top_percent, rects[1].top_percent)

    def test_empty_input(self):
        self.assertEqual(place_courses([], bus=self.bus), [])

    def test_rect_to_dict(self):
        data = place_course(make_course()).to_dict()
        self.assertEqual(data['background'], COURSE_PALETTE[0][0])
        self.assertEqual(data['color'], COURSE_PALETTE[0][1])
        self.assertEqual(data['course']['courseName'], "Math")
        self.assertEqual(data['course']['sectionStart'], 1)


if __name__ == '__main__':
    unittest.main()
