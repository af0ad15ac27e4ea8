"""Join render service layout boxes with lesson records.

A render response carries two lists keyed independently: boxList (geometry
and colors) and lessonInfo (texts and times). A Lesson box points at its
lesson through the first entry of lessonGuids.
"""

from skola24.errors import CorrelationMissing
from skola24.logging import get_logger
from skola24.models import Lesson, RawBox, RawLessonInfo, RenderTimetableResponse
from skola24.temporal import resolve_span

log = get_logger(__name__)

LESSON_BOX_TYPE = "Lesson"
DEFAULT_LUNCH_TEACHER = "https://skolorna.com"


def index_boxes(boxes: list[RawBox]) -> dict[str, RawBox]:
    """Map lesson GUID -> Lesson box. Later boxes win on duplicate GUIDs."""
    index: dict[str, RawBox] = {}
    for box in boxes:
        if box.type != LESSON_BOX_TYPE:
            continue
        if not box.lesson_guids:
            log.debug("lesson_box_without_guid", box_id=box.id)
            continue
        index[box.lesson_guids[0]] = box
    return index


def _split_texts(texts: list[str]) -> tuple[str, str | None, str | None]:
    course = texts[0] if texts else ""
    teacher = texts[1] if len(texts) > 1 else None
    location = texts[2] if len(texts) > 2 else None
    return course, teacher, location


def build_lesson(
    info: RawLessonInfo,
    box: RawBox,
    week: int,
    year: int,
    *,
    lunch_teacher: str = DEFAULT_LUNCH_TEACHER,
) -> Lesson:
    course, teacher, location = _split_texts(info.texts)
    start, end = resolve_span(
        week, year, info.day_of_week_number, info.time_start, info.time_end
    )

    if "lunch" in course.casefold():
        teacher = lunch_teacher

    return Lesson(
        course=course,
        teacher=teacher,
        location=location,
        start=start,
        end=end,
        color=box.b_color,
    )


def correlate_lessons(
    response: RenderTimetableResponse,
    week: int,
    year: int,
    *,
    lunch_teacher: str = DEFAULT_LUNCH_TEACHER,
) -> list[Lesson]:
    """Build one Lesson per lesson record, in lessonInfo order.

    Raises:
        CorrelationMissing: If a lesson record has no Lesson box.
        MalformedTimeString: If a lesson time is not HH:MM:SS.
    """
    boxes = index_boxes(response.boxes)

    lessons: list[Lesson] = []
    for info in response.lessons:
        box = boxes.get(info.guid_id)
        if box is None:
            log.error("lesson_box_missing", guid=info.guid_id, week=week, year=year)
            raise CorrelationMissing(info.guid_id)
        lessons.append(
            build_lesson(info, box, week, year, lunch_teacher=lunch_teacher)
        )

    return lessons
