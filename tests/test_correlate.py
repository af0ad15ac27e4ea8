from datetime import datetime

import pytest

from conftest import lesson_box, lesson_info, make_response
from skola24.correlate import DEFAULT_LUNCH_TEACHER, correlate_lessons, index_boxes
from skola24.errors import CorrelationMissing, MalformedTimeString
from skola24.models import RawBox


def test_correlate_pairs_box_color_with_lesson(two_lesson_response):
    lessons = correlate_lessons(two_lesson_response, 42, 2026)

    assert [lesson.course for lesson in lessons] == ["Math", "Lunch"]
    math, lunch = lessons
    assert math.color == "#fff"
    assert math.teacher == "Ms. Lin"
    assert math.location == "Room 4"
    assert math.start == datetime(2026, 10, 12, 8, 0)
    assert math.end == datetime(2026, 10, 12, 9, 0)
    assert lunch.color == "#000"


def test_one_lesson_per_record_in_input_order():
    response = make_response(
        boxes=[lesson_box("c", "#333"), lesson_box("a", "#111"), lesson_box("b", "#222")],
        lessons=[
            lesson_info("b", ["Biology"]),
            lesson_info("a", ["Art"]),
            lesson_info("c", ["Chemistry"]),
        ],
    )

    lessons = correlate_lessons(response, 10, 2025)

    assert [(l.course, l.color) for l in lessons] == [
        ("Biology", "#222"),
        ("Art", "#111"),
        ("Chemistry", "#333"),
    ]


def test_lunch_override_replaces_teacher():
    response = make_response(
        boxes=[lesson_box("l1"), lesson_box("l2")],
        lessons=[
            lesson_info("l1", ["LUNCH", "Mr. Berg", "Matsal"]),
            lesson_info("l2", ["Skollunch"]),
        ],
    )

    lessons = correlate_lessons(response, 10, 2025)

    assert all(lesson.teacher == DEFAULT_LUNCH_TEACHER for lesson in lessons)
    assert lessons[0].location == "Matsal"


def test_lunch_override_is_configurable():
    response = make_response(
        boxes=[lesson_box("l1")], lessons=[lesson_info("l1", ["lunch"])]
    )

    [lesson] = correlate_lessons(response, 10, 2025, lunch_teacher="Bon appetit")

    assert lesson.teacher == "Bon appetit"


def test_missing_texts_leave_teacher_and_location_absent():
    response = make_response(
        boxes=[lesson_box("x")], lessons=[lesson_info("x", ["Physics"])]
    )

    [lesson] = correlate_lessons(response, 10, 2025)

    assert lesson.course == "Physics"
    assert lesson.teacher is None
    assert lesson.location is None


def test_missing_box_raises():
    response = make_response(
        boxes=[lesson_box("a")],
        lessons=[lesson_info("a", ["Math"]), lesson_info("zzz", ["Ghost"])],
    )

    with pytest.raises(CorrelationMissing) as excinfo:
        correlate_lessons(response, 10, 2025)
    assert excinfo.value.guid == "zzz"


def test_non_lesson_boxes_are_not_correlated():
    response = make_response(
        boxes=[lesson_box("a", type="ClockAxisBox")],
        lessons=[lesson_info("a", ["Math"])],
    )

    with pytest.raises(CorrelationMissing):
        correlate_lessons(response, 10, 2025)


def test_duplicate_guid_last_box_wins():
    boxes = [
        RawBox.model_validate(lesson_box("a", "#first")),
        RawBox.model_validate(lesson_box("a", "#second")),
    ]

    assert index_boxes(boxes)["a"].b_color == "#second"


def test_only_first_guid_is_key():
    box = RawBox.model_validate(lesson_box("a", lessonGuids=["a", "b"]))

    index = index_boxes([box])

    assert list(index) == ["a"]


def test_boxes_without_guids_are_skipped():
    boxes = [
        RawBox.model_validate(lesson_box("a", lessonGuids=None)),
        RawBox.model_validate(lesson_box("a", lessonGuids=[])),
    ]

    assert index_boxes(boxes) == {}


def test_malformed_time_propagates():
    response = make_response(
        boxes=[lesson_box("a")],
        lessons=[lesson_info("a", ["Math"], start="8 o'clock")],
    )

    with pytest.raises(MalformedTimeString):
        correlate_lessons(response, 10, 2025)


def test_empty_response_yields_no_lessons():
    assert correlate_lessons(make_response(), 10, 2025) == []
