"""
Unit tests for parsing API JSON into model objects.

Missing fields must be defaulted, never raise.
"""

import unittest

from badgerbase.model import Course, Meeting, SearchPage, Section


COURSE = {
    "course_id": 12345,
    "subject_code": "266",
    "course_designation": "COMP SCI 400",
    "full_course_designation": "COMPUTER SCIENCES 400",
    "course_title": "Programming III",
    "minimum_credits": 3,
    "maximum_credits": 3,
    "cumulative_gpa": 3.21,
    "a_percent": 41.5,
    "humanities": None,
    "natural_science": "N",
    "sections": [
        {
            "section_id": 41001,
            "status": "OPEN",
            "available_seats": 12,
            "capacity": 200,
            "enrolled": 188,
            "instructors": [{"name": "Jane Doe", "avg_rating": 4.1, "num_ratings": 30, "rmp_instructor_id": None}],
            "meetings": [
                {"meeting_type": "LEC", "meeting_days": "MW", "start_time": "9:55 AM", "end_time": "10:45 AM",
                 "building_name": "Noland Hall", "room": "132", "location": ""}
            ],
        }
    ],
}


class TestModel(unittest.TestCase):
    def test_course_from_dict(self) -> None:
        course = Course.from_dict(COURSE)
        self.assertEqual(course.course_id, "12345")
        self.assertEqual(course.course_designation, "COMP SCI 400")
        self.assertEqual(course.grade_percents["A"], 41.5)
        self.assertIsNone(course.grade_percents["F"])
        self.assertEqual(course.breadth, {"natural_science": "N"})

        section = course.sections[0]
        self.assertEqual(section.section_id, "41001")
        self.assertEqual(section.enrolled, 188)
        self.assertEqual(section.waitlist_total, 0)
        self.assertEqual(section.instructors[0].name, "Jane Doe")
        self.assertIsNone(section.instructors[0].rmp_instructor_id)
        self.assertEqual(section.meetings[0].effective_location, "Noland Hall 132")

    def test_missing_fields_are_defaulted(self) -> None:
        section = Section.from_dict({"section_id": 1})
        self.assertEqual(section.status, "")
        self.assertEqual(section.meetings, [])
        self.assertEqual(section.instructors, [])
        self.assertIsNone(section.section_requisites)

        meeting = Meeting.from_dict({"meeting_type": "DIS"})
        self.assertEqual(meeting.effective_location, " ")

    def test_is_asynchronous_string_values(self) -> None:
        self.assertFalse(Section.from_dict({"section_id": 1, "is_asynchronous": "false"}).is_asynchronous)
        self.assertTrue(Section.from_dict({"section_id": 1, "is_asynchronous": "true"}).is_asynchronous)
        self.assertTrue(Section.from_dict({"section_id": 1, "is_asynchronous": True}).is_asynchronous)
        self.assertFalse(Section.from_dict({"section_id": 1}).is_asynchronous)

    def test_meetings_null_becomes_empty(self) -> None:
        self.assertEqual(Section.from_dict({"section_id": 1, "meetings": None}).meetings, [])

    def test_non_object_raises(self) -> None:
        with self.assertRaises(ValueError):
            Section.from_dict(["not", "a", "dict"])

    def test_search_page(self) -> None:
        page = SearchPage.from_dict({"data": [COURSE], "total_count": 41, "has_more": True})
        self.assertEqual(len(page.courses), 1)
        self.assertEqual(page.count, 1)
        self.assertEqual(page.total_count, 41)
        self.assertTrue(page.has_more)

        empty = SearchPage.from_dict({})
        self.assertEqual(empty.courses, [])
        self.assertFalse(empty.has_more)


if __name__ == "__main__":
    unittest.main()
