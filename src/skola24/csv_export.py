"""Serialize lessons to the CSV layout accepted by Google/Outlook calendar import.

By default fields are joined with bare commas and no quoting, so a comma in a
course, teacher or room corrupts that row. Pass quote=True to quote such
fields instead.
"""

import csv
import io
from datetime import datetime
from pathlib import Path

from skola24.logging import get_logger
from skola24.models import Lesson

log = get_logger(__name__)

CSV_HEADER: list[str] = [
    "Subject",
    "Start Date",
    "Start Time",
    "End Date",
    "End Time",
    "All Day Event",
    "Description",
    "Location",
    "Private",
    "Recurring",
]


def format_short_date(value: datetime) -> str:
    """US short date, e.g. "10/19/2026"."""
    return f"{value.month}/{value.day}/{value.year}"


def format_simple_time(value: datetime) -> str:
    """12-hour time without seconds, e.g. "8:05 AM"."""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def lesson_row(lesson: Lesson) -> list[str]:
    return [
        lesson.course,
        format_short_date(lesson.start),
        format_simple_time(lesson.start),
        format_short_date(lesson.end),
        format_simple_time(lesson.end),
        "FALSE",
        lesson.teacher or "",
        lesson.location or "",
        "TRUE",
        "N",
    ]


def lessons_to_csv(lessons: list[Lesson], *, quote: bool = False) -> str:
    """Render lessons as CSV text: a header line plus one line per lesson.

    Lines are separated by "\\n" with no trailing newline.
    """
    rows = [CSV_HEADER, *(lesson_row(lesson) for lesson in lessons)]

    if not quote:
        return "\n".join(",".join(row) for row in rows)

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerows(rows)
    return buffer.getvalue().removesuffix("\n")


def write_csv(path: str | Path, text: str) -> Path:
    """Write CSV text as UTF-8, replacing any existing file."""
    output = Path(path)
    output.write_text(text, encoding="utf-8")
    log.info("csv_written", path=str(output), bytes=len(text.encode("utf-8")))
    return output
