import unittest

from badgerbase.formatting import (
    format_credits,
    format_enrollment,
    format_instructors,
    format_meeting_display,
    format_meeting_time,
    format_rating,
    meeting_type_label,
    section_label,
    status_markup,
    status_style,
)
from badgerbase.model import Instructor, Meeting, Section


class TestFormatting(unittest.TestCase):
    def test_status_style(self) -> None:
        self.assertEqual(status_style("OPEN"), "open")
        self.assertEqual(status_style("closed"), "closed")
        self.assertEqual(status_style("Waitlist"), "waitlist")
        self.assertEqual(status_style("CANCELLED"), "unknown")
        self.assertEqual(status_style(None), "unknown")

    def test_status_markup_uses_color(self) -> None:
        self.assertEqual(status_markup("open"), "[green]OPEN[/]")
        self.assertEqual(status_markup(""), "[bright_black]N/A[/]")

    def test_meeting_type_label(self) -> None:
        self.assertEqual(meeting_type_label("LEC"), "Lecture")
        self.assertEqual(meeting_type_label("dis"), "Discussion")
        self.assertEqual(meeting_type_label("LAB"), "Lab")
        self.assertEqual(meeting_type_label("SEM"), "Seminar")
        self.assertEqual(meeting_type_label("FLD"), "FLD")

    def test_section_label(self) -> None:
        self.assertEqual(section_label([]), "Section")
        self.assertEqual(section_label(["LAB"]), "Lab")
        self.assertEqual(section_label(["DIS", "LAB"]), "Discussion + Lab")

    def test_meeting_time_uses_en_dash(self) -> None:
        self.assertEqual(format_meeting_time("9:55 AM", "10:45 AM"), "9:55 AM–10:45 AM")

    def test_meeting_display(self) -> None:
        meetings = [
            Meeting(meeting_type="DIS", meeting_days="T", start_time="11:00", end_time="11:50", location="Room 202"),
            Meeting(meeting_type="LAB", meeting_days="F", start_time="1:00", end_time="2:50", building_name="Chem", room="1315"),
        ]
        self.assertEqual(
            format_meeting_display(meetings),
            "T 11:00–11:50 (Room 202), F 1:00–2:50 (Chem 1315)",
        )
        self.assertEqual(format_meeting_display([]), "")

    def test_rating(self) -> None:
        self.assertEqual(format_rating(4.25), "4.2")
        self.assertEqual(format_rating(None), "N/A")
        self.assertEqual(format_rating(0), "N/A")

    def test_credits(self) -> None:
        self.assertEqual(format_credits(3, 3), "3")
        self.assertEqual(format_credits(1, 4), "1-4")
        self.assertEqual(format_credits(None, None), "N/A")

    def test_enrollment_and_instructors(self) -> None:
        s = Section(section_id="1", enrolled=30, capacity=30, waitlist_total=4)
        self.assertEqual(format_enrollment(s), "30/30 (+4 waitlisted)")
        self.assertEqual(format_instructors([]), "TBA")
        rated = Instructor(name="Ada Lovelace", avg_rating=4.5, avg_difficulty=3.0, num_ratings=12)
        self.assertEqual(
            format_instructors([rated, Instructor(name="Bob")]),
            "Ada Lovelace (rating 4.5, difficulty 3.0, 12 reviews); Bob",
        )


if __name__ == "__main__":
    unittest.main()
