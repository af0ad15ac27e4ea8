"""Run the per-week pipeline for a range of weeks concurrently.

Each week is fetched, correlated and resolved in its own task. Results are
settled per week and returned in the order the weeks were requested,
whatever order the fetches complete in.
"""

import asyncio
from typing import Protocol

from skola24.correlate import DEFAULT_LUNCH_TEACHER, correlate_lessons
from skola24.logging import get_logger
from skola24.models import BatchResult, Lesson, RenderTimetableResponse, WeekOutcome

log = get_logger(__name__)


class TimetableSource(Protocol):
    async def fetch_timetable(self, week: int, year: int) -> RenderTimetableResponse: ...


async def extract_week(
    source: TimetableSource,
    week: int,
    year: int,
    *,
    lunch_teacher: str = DEFAULT_LUNCH_TEACHER,
) -> WeekOutcome:
    """Fetch, correlate and resolve a single week. Errors propagate."""
    response = await source.fetch_timetable(week, year)

    if not response.has_lesson_data:
        log.info("week_empty", week=week, year=year)
        return WeekOutcome(week=week, year=year, status="empty")

    lessons = correlate_lessons(response, week, year, lunch_teacher=lunch_teacher)
    log.info("week_extracted", week=week, year=year, lessons=len(lessons))
    return WeekOutcome(week=week, year=year, status="ok", lessons=lessons)


async def collect_weeks(
    source: TimetableSource,
    weeks: list[int],
    year: int,
    *,
    lunch_teacher: str = DEFAULT_LUNCH_TEACHER,
) -> BatchResult:
    """Run every week concurrently and settle each one independently.

    A failing week becomes a "failed" outcome carrying its exception; the
    other weeks are unaffected.
    """
    results = await asyncio.gather(
        *(
            extract_week(source, week, year, lunch_teacher=lunch_teacher)
            for week in weeks
        ),
        return_exceptions=True,
    )

    outcomes: list[WeekOutcome] = []
    for week, result in zip(weeks, results):
        if isinstance(result, Exception):
            log.error(
                "week_failed",
                week=week,
                year=year,
                error=str(result),
                type=type(result).__name__,
            )
            outcomes.append(
                WeekOutcome(week=week, year=year, status="failed", error=result)
            )
        elif isinstance(result, BaseException):
            raise result
        else:
            outcomes.append(result)

    return BatchResult(outcomes=outcomes)


async def extract_lessons(
    source: TimetableSource,
    weeks: list[int],
    year: int,
    *,
    lunch_teacher: str = DEFAULT_LUNCH_TEACHER,
) -> list[Lesson]:
    """All lessons for `weeks`, in request order; fails if any week failed.

    Raises:
        BatchFailed: Listing every failed week, chained from the first failure.
    """
    batch = await collect_weeks(source, weeks, year, lunch_teacher=lunch_teacher)
    batch.raise_for_failures()

    lessons = batch.lessons
    log.info("batch_extracted", weeks=len(weeks), lessons=len(lessons))
    return lessons
