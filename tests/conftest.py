import pytest

from skola24.models import RenderTimetableResponse


def make_response(boxes=None, lessons=None, error=None) -> RenderTimetableResponse:
    """Build a render response from wire-shaped dicts."""
    return RenderTimetableResponse.model_validate(
        {
            "error": error,
            "data": {
                "textList": [],
                "boxList": boxes,
                "lineList": [],
                "lessonInfo": lessons,
            },
        }
    )


def lesson_box(guid, color="#fff", **extra):
    return {
        "x": 10,
        "y": 20,
        "width": 100,
        "height": 40,
        "bColor": color,
        "fColor": "#000000",
        "id": 1,
        "parentId": 0,
        "type": "Lesson",
        "lessonGuids": [guid],
        **extra,
    }


def lesson_info(guid, texts, weekday=1, start="08:00:00", end="09:00:00"):
    return {
        "guidId": guid,
        "texts": texts,
        "timeStart": start,
        "timeEnd": end,
        "dayOfWeekNumber": weekday,
        "blockName": "",
    }


@pytest.fixture
def two_lesson_response() -> RenderTimetableResponse:
    return make_response(
        boxes=[lesson_box("a", "#fff"), lesson_box("b", "#000")],
        lessons=[
            lesson_info("a", ["Math", "Ms. Lin", "Room 4"], 1, "08:00:00", "09:00:00"),
            lesson_info("b", ["Lunch"], 1, "12:00:00", "12:30:00"),
        ],
    )
