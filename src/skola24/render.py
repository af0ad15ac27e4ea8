"""Skola24 render service client.

Both calls run inside the schedule viewer page through the browser's own
fetch(), so they carry the viewer's cookies and origin. Each render request
needs a fresh render key, and both calls need the X-Scope value captured
while the viewer loaded.

Endpoints (relative to the viewer origin):
  POST /ng/api/get/timetable/render/key  -> {"data": {"key": "..."}}
  POST /ng/api/render/timetable          -> {"error": ..., "data": {"boxList": [...], "lessonInfo": [...]}}
"""

import asyncio
import json
from typing import Any

from playwright.async_api import Error as PlaywrightError, Page
from pydantic import ValidationError

from skola24.errors import (
    MalformedLessonRecord,
    RenderFetchFailed,
    RenderKeyFetchFailed,
    RenderRequestRejected,
)
from skola24.logging import get_logger
from skola24.models import (
    AuthorizationScope,
    RenderKey,
    RenderKeyResponse,
    RenderTimetableResponse,
    Selection,
)

log = get_logger(__name__)

RENDER_KEY_PATH = "/ng/api/get/timetable/render/key"
RENDER_TIMETABLE_PATH = "/ng/api/render/timetable"

# Fixed render options, as sent by the viewer itself for a personal timetable
RENDER_DEFAULTS: dict[str, Any] = {
    "startDate": None,
    "endDate": None,
    "scheduleDay": 0,
    "blackAndWhite": False,
    "width": 732,
    "height": 550,
    "selectionType": 5,
    "showHeader": False,
    "periodText": "",
    "privateFreeTextMode": None,
    "privateSelectionMode": True,
    "customerKey": "",
}

# Validation errors under these keys are bad records, not a broken transport
_RECORD_LISTS = {"boxList", "lessonInfo"}

_FETCH_JS = """async ([path, scope, body]) => {
    const headers = {"X-Scope": scope};
    if (body !== null) {
        headers["Content-Type"] = "application/json";
    }
    const res = await fetch(path, {method: "POST", headers, body});
    return {status: res.status, text: await res.text()};
}"""


def _is_record_error(error: ValidationError) -> bool:
    return any(
        len(detail["loc"]) > 1
        and detail["loc"][0] == "data"
        and detail["loc"][1] in _RECORD_LISTS
        for detail in error.errors()
    )


def build_render_request(
    key: RenderKey, selection: Selection, week: int, year: int, *, host: str
) -> dict[str, Any]:
    """Body of the render request for one week."""
    return {
        "renderKey": key,
        "host": host,
        "unitGuid": selection.unit_guid,
        **RENDER_DEFAULTS,
        "selection": selection.person_guid,
        "week": week,
        "year": year,
    }


class RenderClient:
    """Render key exchange and timetable fetch for one student.

    The scope and selection are fixed for the lifetime of the client.
    """

    def __init__(
        self,
        page: Page,
        scope: AuthorizationScope,
        selection: Selection,
        *,
        host: str = "fns.stockholm.se",
        timeout: float = 30.0,
    ) -> None:
        self.page = page
        self.scope = scope
        self.selection = selection
        self.host = host
        self.timeout = timeout

    async def _post(self, path: str, body: str | None) -> tuple[int, str]:
        result = await asyncio.wait_for(
            self.page.evaluate(_FETCH_JS, [path, self.scope, body]),
            timeout=self.timeout,
        )
        return result["status"], result["text"]

    async def fetch_render_key(self) -> RenderKey:
        """Request a single-use render key.

        Raises:
            RenderKeyFetchFailed: On transport error, timeout, non-2xx status
                or an unexpected body.
        """
        try:
            status, text = await self._post(RENDER_KEY_PATH, None)
        except (PlaywrightError, asyncio.TimeoutError) as e:
            raise RenderKeyFetchFailed(f"Render key request failed: {e}") from e

        if not 200 <= status < 300:
            raise RenderKeyFetchFailed(f"Render key request returned HTTP {status}")

        try:
            key = RenderKeyResponse.model_validate_json(text).data.key
        except ValidationError as e:
            raise RenderKeyFetchFailed(f"Unexpected render key response: {e}") from e

        log.debug("render_key_fetched")
        return RenderKey(key)

    async def fetch_timetable(self, week: int, year: int) -> RenderTimetableResponse:
        """Render one week and return the raw box and lesson records.

        Raises:
            RenderKeyFetchFailed: If the key exchange fails.
            RenderFetchFailed: On transport error, timeout or an unparseable body.
            RenderRequestRejected: If the service reports an error.
            MalformedLessonRecord: If a box or lesson record is invalid.
        """
        key = await self.fetch_render_key()
        body = json.dumps(
            build_render_request(key, self.selection, week, year, host=self.host)
        )

        log.info("render_requested", week=week, year=year)
        try:
            status, text = await self._post(RENDER_TIMETABLE_PATH, body)
        except (PlaywrightError, asyncio.TimeoutError) as e:
            raise RenderFetchFailed(f"Render request for W{week}Y{year} failed: {e}") from e

        try:
            response = RenderTimetableResponse.model_validate_json(text)
        except ValidationError as e:
            if _is_record_error(e):
                log.error("render_records_invalid", week=week, year=year, error=str(e))
                raise MalformedLessonRecord(
                    f"Invalid lesson data for W{week}Y{year}: {e}"
                ) from e
            raise RenderFetchFailed(
                f"Unexpected render response for W{week}Y{year} (HTTP {status}): {e}"
            ) from e

        if response.error is not None:
            log.warning("render_rejected", week=week, year=year, error=response.error)
            raise RenderRequestRejected(response.error)

        if not 200 <= status < 300:
            raise RenderFetchFailed(f"Render request for W{week}Y{year} returned HTTP {status}")

        log.debug(
            "render_received",
            week=week,
            year=year,
            boxes=len(response.boxes),
            lessons=len(response.lessons),
        )
        return response
