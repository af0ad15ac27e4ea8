"""Capture values that only appear in the schedule viewer's own traffic.

While the viewer loads, its scripts send requests carrying an X-Scope header
and fetch the student's personal timetables. Neither is reachable any other
way, so NavigationCapture watches the traffic of a page or browser context
and resolves one future for each value.

Requests are never blocked or modified: every route is handed on with
route.fallback(), so other handlers (resource blocking) still apply.
"""

import asyncio

from playwright.async_api import (
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Request,
    Response,
    Route,
)
from pydantic import ValidationError

from skola24.errors import MissingAuthorizationScope, TimetableMetadataMissing
from skola24.logging import get_logger
from skola24.models import (
    AuthorizationScope,
    PersonalTimetablesResponse,
    Selection,
    StudentTimetable,
)

log = get_logger(__name__)

SCOPE_HEADER = "x-scope"


class NavigationCapture:
    """Observe viewer traffic and capture the X-Scope value and timetables metadata.

    Attach to the BrowserContext before triggering the navigation, so the
    popup's first requests are seen, and pass the opener as `exclude`: only
    traffic from the viewer counts, never the portal page's own X-Scope.
    Read scope() and student() once the navigation has settled.
    """

    def __init__(self, timetables_url: str) -> None:
        self.timetables_url = timetables_url
        self.exclude: Page | None = None
        loop = asyncio.get_running_loop()
        self._scope: asyncio.Future[AuthorizationScope] = loop.create_future()
        self._timetables: asyncio.Future[PersonalTimetablesResponse] = (
            loop.create_future()
        )

    async def attach(
        self, target: Page | BrowserContext, *, exclude: Page | None = None
    ) -> None:
        self.exclude = exclude
        await target.route("**/*", self._on_route)
        target.on("response", self._on_response)
        log.debug("capture_attached")

    async def detach(self, target: Page | BrowserContext) -> None:
        await target.unroute("**/*", self._on_route)
        target.remove_listener("response", self._on_response)
        log.debug("capture_detached")

    def observe_request(self, request: Request) -> None:
        """Record the first X-Scope header seen. Later values are ignored."""
        if self._scope.done():
            return
        if self._from_excluded_page(request):
            return
        value = request.headers.get(SCOPE_HEADER)
        if value:
            self._scope.set_result(AuthorizationScope(value))
            log.info("scope_captured", url=request.url)

    def _from_excluded_page(self, request: Request) -> bool:
        if self.exclude is None:
            return False
        try:
            return request.frame.page is self.exclude
        except PlaywrightError:
            # Service worker requests have no frame
            return False

    async def _on_route(self, route: Route) -> None:
        self.observe_request(route.request)
        await route.fallback()

    async def _on_response(self, response: Response) -> None:
        if self._timetables.done() or response.url != self.timetables_url:
            return
        if self.exclude is not None and self._from_excluded_page(response.request):
            return
        try:
            body = await response.text()
            parsed = PersonalTimetablesResponse.model_validate_json(body)
        except (PlaywrightError, ValidationError) as e:
            log.warning("timetables_response_invalid", error=str(e))
            return
        self._timetables.set_result(parsed)
        log.info("timetables_captured", students=len(parsed.students))

    async def settle(self, timeout: float) -> None:
        """Wait up to `timeout` seconds for both values; never raises on timeout."""
        await asyncio.wait([self._scope, self._timetables], timeout=timeout)

    @property
    def scope_future(self) -> "asyncio.Future[AuthorizationScope]":
        return self._scope

    def scope(self) -> AuthorizationScope:
        """The captured X-Scope value.

        Raises:
            MissingAuthorizationScope: If no request carried the header.
        """
        if not self._scope.done():
            raise MissingAuthorizationScope("Failed to capture X-Scope")
        return self._scope.result()

    def student(self) -> StudentTimetable:
        """The first student of the captured personal timetables response.

        Raises:
            TimetableMetadataMissing: If the response was never seen or listed
                no students.
        """
        if not self._timetables.done():
            raise TimetableMetadataMissing("Got no personal timetables response")
        students = self._timetables.result().students
        if not students:
            raise TimetableMetadataMissing("Personal timetables response lists no students")
        return students[0]

    def selection(self) -> Selection:
        info = self.student()
        return Selection(person_guid=info.person_guid, unit_guid=info.unit_guid)
