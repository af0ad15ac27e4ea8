"""Export a Skolplattformen timetable to a calendar-importable CSV file.

Logs in, opens the schedule viewer to capture its X-Scope value and the
student's GUIDs, renders every requested week concurrently and writes the
lessons to result.csv (or --output).

Run with: skola24-export
Debug:    skola24-export --headed
Range:    skola24-export --year 2026 --week-start 34 --week-end 51
Quoted:   skola24-export --quote --output autumn.csv

Credentials are read from SKOLPLATTFORMEN_EMAIL, SKOLPLATTFORMEN_USER and
SKOLPLATTFORMEN_PASS (environment or .env) and prompted for when missing.

Exit codes:
  0 = success (CSV written)
  1 = error (message on stderr, nothing written)
"""

import argparse
import asyncio
import getpass
import sys
from datetime import date

from dotenv import load_dotenv
from playwright.async_api import async_playwright

from skola24.batch import extract_lessons
from skola24.capture import NavigationCapture
from skola24.config import ExporterConfig, get_config
from skola24.csv_export import lessons_to_csv, write_csv
from skola24.logging import get_logger, setup_logging
from skola24.models import Credentials
from skola24.render import RenderClient
from skola24.session import SessionEstablisher, open_schedule_viewer
from skola24.temporal import weeks_in_year
from skola24.utils import configure_context_for_scraping

log = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    today = date.today()
    iso_year, iso_week, _ = today.isocalendar()

    parser = argparse.ArgumentParser(
        description="Export a Skolplattformen timetable to CSV.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--year",
        type=int,
        default=iso_year,
        help=f"ISO week-year to export (default: {iso_year}).",
    )
    parser.add_argument(
        "--week-start",
        type=int,
        default=None,
        help=f"First week number, inclusive (default: current week, {iso_week}).",
    )
    parser.add_argument(
        "--week-end",
        type=int,
        default=None,
        help="Last week number, inclusive (default: last ISO week of --year).",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output CSV path (default: OUTPUT_PATH or result.csv).",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Launch browser in headed mode (visible window).",
    )
    parser.add_argument(
        "--quote",
        action="store_true",
        help="Quote fields that contain commas instead of emitting them bare.",
    )
    args = parser.parse_args(argv)

    if args.week_start is None:
        args.week_start = iso_week
    if args.week_end is None:
        args.week_end = weeks_in_year(args.year)
    if args.week_end < args.week_start:
        parser.error(
            f"--week-end ({args.week_end}) is before --week-start ({args.week_start})"
        )
    return args


def week_range(start: int, end: int) -> list[int]:
    """Inclusive list of week numbers."""
    return list(range(start, end + 1))


def _collect_credentials(config: ExporterConfig) -> Credentials:
    """Credentials from config, prompting for whatever is missing."""
    email = config.skolplattformen_email or input("Email: ")
    username = config.skolplattformen_user
    while not username:
        username = input("Username: ").strip()
    password = config.skolplattformen_pass or getpass.getpass("Password: ")
    return Credentials(email=email, username=username, password=password)


async def main(args: argparse.Namespace, config: ExporterConfig) -> None:
    weeks = week_range(args.week_start, args.week_end)
    output_path = args.output or config.output_path
    quote = args.quote or config.csv_quote_fields
    credentials = _collect_credentials(config)

    log.info("export_started", year=args.year, weeks=f"{weeks[0]}-{weeks[-1]}")

    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=config.headless and not args.headed)
        try:
            context = await browser.new_context()
            await configure_context_for_scraping(
                context, block_resources=config.block_resources
            )
            page = await context.new_page()

            # --- Authenticate ---
            establisher = SessionEstablisher(config.skolplattformen_url)
            await establisher.establish(page, credentials)

            # --- Capture scope and student from the viewer's own traffic ---
            capture = NavigationCapture(config.timetables_url)
            viewer = await open_schedule_viewer(page, capture)
            scope = capture.scope()
            student = capture.student()
            log.info(
                "reading_timetables",
                student=f"{student.first_name} {student.last_name}",
            )

            # --- Render all weeks ---
            client = RenderClient(
                viewer,
                scope,
                capture.selection(),
                host=config.render_host,
                timeout=config.request_timeout_seconds,
            )
            lessons = await extract_lessons(
                client,
                weeks,
                args.year,
                lunch_teacher=config.lunch_teacher_override,
            )
        finally:
            await browser.close()

    log.info("lessons_parsed", count=len(lessons))
    write_csv(output_path, lessons_to_csv(lessons, quote=quote))


def run(argv: list[str] | None = None) -> None:
    """Console script entry point."""
    load_dotenv()
    args = _parse_args(argv)
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)
    try:
        asyncio.run(main(args, config))
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    run()
