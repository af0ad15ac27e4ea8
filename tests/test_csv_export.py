from datetime import datetime

from skola24.correlate import correlate_lessons
from skola24.csv_export import (
    CSV_HEADER,
    format_short_date,
    format_simple_time,
    lessons_to_csv,
    write_csv,
)
from skola24.models import Lesson

HEADER_LINE = (
    "Subject,Start Date,Start Time,End Date,End Time,"
    "All Day Event,Description,Location,Private,Recurring"
)


def _lesson(course="Math", teacher="Ms. Lin", location="Room 4", start=None, end=None):
    return Lesson(
        course=course,
        teacher=teacher,
        location=location,
        start=start or datetime(2026, 10, 12, 8, 15),
        end=end or datetime(2026, 10, 12, 9, 0),
        color="#fff",
    )


def test_header():
    assert ",".join(CSV_HEADER) == HEADER_LINE
    assert lessons_to_csv([]) == HEADER_LINE


def test_formats():
    assert format_short_date(datetime(2026, 1, 5)) == "1/5/2026"
    assert format_simple_time(datetime(2026, 1, 5, 8, 5)) == "8:05 AM"
    assert format_simple_time(datetime(2026, 1, 5, 12, 30)) == "12:30 PM"
    assert format_simple_time(datetime(2026, 1, 5, 0, 10)) == "12:10 AM"
    assert format_simple_time(datetime(2026, 1, 5, 23, 59)) == "11:59 PM"


def test_row_layout():
    text = lessons_to_csv([_lesson()])

    assert text.splitlines()[1] == (
        "Math,10/12/2026,8:15 AM,10/12/2026,9:00 AM,FALSE,Ms. Lin,Room 4,TRUE,N"
    )


def test_n_lessons_give_n_plus_one_lines():
    lessons = [_lesson(course=f"Course {i}") for i in range(5)]

    text = lessons_to_csv(lessons)

    assert len(text.split("\n")) == 6
    assert not text.endswith("\n")


def test_dates_parse_back_to_the_minute():
    start = datetime(2026, 3, 9, 13, 45)
    end = datetime(2026, 3, 9, 14, 30)

    row = lessons_to_csv([_lesson(start=start, end=end)]).split("\n")[1].split(",")

    assert datetime.strptime(f"{row[1]} {row[2]}", "%m/%d/%Y %I:%M %p") == start
    assert datetime.strptime(f"{row[3]} {row[4]}", "%m/%d/%Y %I:%M %p") == end


def test_absent_teacher_and_location_are_blank():
    row = lessons_to_csv([_lesson(teacher=None, location=None)]).split("\n")[1]

    assert row.split(",")[6:8] == ["", ""]


def test_commas_are_not_escaped_by_default():
    row = lessons_to_csv([_lesson(location="Room 4, floor 2")]).split("\n")[1]

    assert len(row.split(",")) == len(CSV_HEADER) + 1


def test_quote_mode_quotes_commas():
    row = lessons_to_csv([_lesson(location="Room 4, floor 2")], quote=True).split("\n")[1]

    assert row.endswith(',"Room 4, floor 2",TRUE,N')


def test_end_to_end_scenario(two_lesson_response):
    lessons = correlate_lessons(two_lesson_response, 42, 2026)

    lines = lessons_to_csv(lessons).split("\n")

    assert len(lines) == 3
    assert lines[1] == (
        "Math,10/12/2026,8:00 AM,10/12/2026,9:00 AM,FALSE,Ms. Lin,Room 4,TRUE,N"
    )
    assert lines[2] == (
        "Lunch,10/12/2026,12:00 PM,10/12/2026,12:30 PM,FALSE,"
        "https://skolorna.com,,TRUE,N"
    )


def test_write_csv_overwrites_as_utf8(tmp_path):
    path = tmp_path / "result.csv"
    path.write_text("old content that is longer than the new one", encoding="utf-8")

    write_csv(path, "Subject\nÄmne")

    assert path.read_bytes() == "Subject\nÄmne".encode("utf-8")
