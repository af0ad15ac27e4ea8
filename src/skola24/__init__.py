"""Skolplattformen / Skola24 timetable exporter.

Captures the viewer's X-Scope value, renders each requested week through the
Skola24 render service, joins layout boxes with lesson records and writes a
calendar-importable CSV.
"""

from skola24.batch import collect_weeks, extract_lessons
from skola24.capture import NavigationCapture
from skola24.correlate import correlate_lessons
from skola24.csv_export import lessons_to_csv, write_csv
from skola24.models import BatchResult, Lesson, WeekOutcome
from skola24.render import RenderClient
from skola24.temporal import resolve_instant, week_start

__all__ = [
    "NavigationCapture",
    "RenderClient",
    "correlate_lessons",
    "resolve_instant",
    "week_start",
    "collect_weeks",
    "extract_lessons",
    "lessons_to_csv",
    "write_csv",
    "Lesson",
    "WeekOutcome",
    "BatchResult",
]
