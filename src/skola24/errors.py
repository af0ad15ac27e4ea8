"""Error hierarchy for timetable extraction.

Failures are split into transient (network, timeouts: a later run may succeed)
and permanent (the portal answered, but with something we cannot use).
Extraction is single-attempt, so the split only drives logging and the
messages shown to the user.
"""


class ScrapingError(Exception):
    """Base exception for all extraction errors."""

    pass


class TransientError(ScrapingError):
    """Temporary failure that may succeed on a later run.

    Examples: network timeouts, 5xx responses, popup not opening in time.
    """

    pass


class PermanentError(ScrapingError):
    """Failure that won't succeed on retry.

    Examples: rejected render request, lesson without a layout box.
    """

    pass


class AuthenticationFailed(PermanentError):
    """The login sequence did not reach the authenticated start page."""

    pass


class MissingAuthorizationScope(PermanentError):
    """The schedule viewer finished loading without sending an X-Scope header."""

    pass


class TimetableMetadataMissing(PermanentError):
    """The personal timetables response was never observed or was empty."""

    pass


class RenderKeyFetchFailed(TransientError):
    """The render key exchange failed (network, HTTP status or body shape)."""

    pass


class RenderFetchFailed(TransientError):
    """The timetable render request could not be completed."""

    pass


class RenderRequestRejected(PermanentError):
    """The render service answered with an application-level error."""

    def __init__(self, detail: object) -> None:
        self.detail = detail
        super().__init__(f"Render request rejected: {detail!r}")


class MalformedLessonRecord(PermanentError):
    """A lesson or box record in a render response fails validation.

    Example: dayOfWeekNumber outside 1-7.
    """

    pass


class CorrelationMissing(PermanentError):
    """A lesson record has no matching Lesson box in the same response."""

    def __init__(self, guid: str) -> None:
        self.guid = guid
        super().__init__(f"No lesson box found for lesson {guid!r}")


class MalformedTimeString(PermanentError):
    """A time-of-day field is not shaped like HH:MM:SS."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Malformed time string: {value!r}")


class BatchFailed(ScrapingError):
    """One or more weeks of a batch failed.

    Attributes:
        failures: WeekOutcome entries with status "failed", in request order.
    """

    def __init__(self, failures: list) -> None:
        self.failures = failures
        summary = ", ".join(
            f"W{outcome.week}: {outcome.error}" for outcome in failures
        )
        super().__init__(f"{len(failures)} week(s) failed ({summary})")
