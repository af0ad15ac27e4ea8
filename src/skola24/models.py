"""Pydantic models for Skola24 timetable data.

Raw models mirror the render service JSON (camelCase wire names are kept as
aliases). Lesson is the normalized entity written to the CSV.
"""

from datetime import datetime
from typing import Any, Literal, NewType

from pydantic import BaseModel, ConfigDict, Field

from skola24.errors import BatchFailed

AuthorizationScope = NewType("AuthorizationScope", str)
RenderKey = NewType("RenderKey", str)


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RawBox(_WireModel):
    """A layout box from the render response boxList.

    Only boxes with type "Lesson" are correlated; the first entry of
    lesson_guids is the key that joins the box to its lesson record.
    """

    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0
    b_color: str = Field(default="", alias="bColor")  # fill, e.g. "#FFD966"
    f_color: str = Field(default="", alias="fColor")  # text color
    id: int = 0
    parent_id: int = Field(default=0, alias="parentId")
    type: str = ""
    lesson_guids: list[str] | None = Field(default=None, alias="lessonGuids")


class RawLessonInfo(_WireModel):
    """A lesson record from the render response lessonInfo.

    texts is positional: course, teacher, location. Trailing entries are
    omitted by the portal when unknown.
    """

    guid_id: str = Field(alias="guidId")
    texts: list[str] = Field(default_factory=list)
    time_start: str = Field(alias="timeStart")  # "08:15:00"
    time_end: str = Field(alias="timeEnd")
    day_of_week_number: int = Field(alias="dayOfWeekNumber", ge=1, le=7)
    block_name: str | None = Field(default=None, alias="blockName")


class RenderTimetableData(_WireModel):
    text_list: list[Any] | None = Field(default=None, alias="textList")
    box_list: list[RawBox] | None = Field(default=None, alias="boxList")
    line_list: list[Any] | None = Field(default=None, alias="lineList")
    lesson_info: list[RawLessonInfo] | None = Field(default=None, alias="lessonInfo")


class RenderTimetableResponse(_WireModel):
    """Body of POST /ng/api/render/timetable."""

    error: Any = None
    data: RenderTimetableData | None = None

    @property
    def boxes(self) -> list[RawBox]:
        if self.data is None or self.data.box_list is None:
            return []
        return self.data.box_list

    @property
    def lessons(self) -> list[RawLessonInfo]:
        if self.data is None or self.data.lesson_info is None:
            return []
        return self.data.lesson_info

    @property
    def has_lesson_data(self) -> bool:
        """False when the portal sent no lessonInfo at all (e.g. holiday weeks)."""
        return self.data is not None and self.data.lesson_info is not None


class RenderKeyData(_WireModel):
    key: str


class RenderKeyResponse(_WireModel):
    """Body of POST /ng/api/get/timetable/render/key."""

    data: RenderKeyData


class StudentTimetable(_WireModel):
    """One entry of the personal timetables metadata response."""

    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    person_guid: str = Field(alias="personGuid")
    school_guid: str | None = Field(default=None, alias="schoolGuid")
    school_id: str | None = Field(default=None, alias="schoolID")
    timetable_id: str | None = Field(default=None, alias="timetableID")
    unit_guid: str = Field(alias="unitGuid")


class _PersonalTimetables(_WireModel):
    student_timetables: list[StudentTimetable] = Field(
        default_factory=list, alias="studentTimetables"
    )


class _PersonalTimetablesData(_WireModel):
    get_personal_timetables_response: _PersonalTimetables = Field(
        alias="getPersonalTimetablesResponse"
    )


class PersonalTimetablesResponse(_WireModel):
    """Body of .../skola24/get/personal/timetables."""

    data: _PersonalTimetablesData

    @property
    def students(self) -> list[StudentTimetable]:
        return self.data.get_personal_timetables_response.student_timetables


class Selection(BaseModel):
    """Whose timetable to render: the student and their organizational unit."""

    model_config = ConfigDict(frozen=True)

    person_guid: str
    unit_guid: str


class Credentials(BaseModel):
    email: str
    username: str
    password: str


class Lesson(BaseModel):
    """A single lesson with absolute start/end, ready for serialization."""

    model_config = ConfigDict(frozen=True)

    course: str
    teacher: str | None = None
    location: str | None = None
    start: datetime
    end: datetime
    color: str


class WeekOutcome(BaseModel):
    """Settled result of one week's fetch/correlate/resolve pipeline.

    status is "empty" when the portal returned no lesson data for the week,
    which is a valid answer and distinct from "failed".
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    week: int
    year: int
    status: Literal["ok", "empty", "failed"]
    lessons: list[Lesson] = Field(default_factory=list)
    error: Exception | None = None


class BatchResult(BaseModel):
    """Per-week outcomes in the order the weeks were requested."""

    outcomes: list[WeekOutcome]

    @property
    def lessons(self) -> list[Lesson]:
        return [lesson for outcome in self.outcomes for lesson in outcome.lessons]

    @property
    def failures(self) -> list[WeekOutcome]:
        return [o for o in self.outcomes if o.status == "failed"]

    @property
    def succeeded_weeks(self) -> list[int]:
        return [o.week for o in self.outcomes if o.status != "failed"]

    def raise_for_failures(self) -> None:
        """Raise BatchFailed if any week failed, chained from the first error."""
        failures = self.failures
        if failures:
            raise BatchFailed(failures) from failures[0].error
