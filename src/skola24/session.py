"""Playwright login and schedule viewer navigation for Skolplattformen.

SessionEstablisher walks the SSO sequence from the portal start page to the
authenticated landing page. open_schedule_viewer() then opens the
"Schemavisaren" popup, whose own traffic yields the X-Scope value and the
student metadata.
"""

from playwright.async_api import Error as PlaywrightError, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from skola24.capture import NavigationCapture
from skola24.errors import AuthenticationFailed, TransientError
from skola24.logging import get_logger
from skola24.models import Credentials

logger = get_logger(__name__)

# Selectors confirmed against the portal and its SSO pages
EMAIL_INPUT = "input[type=email]"
EMAIL_SUBMIT = "input[type=submit]"
STUDENT_REALM_LINK = 'a:has-text("Elever")'
PASSWORD_LOGIN_LINK = 'a:has-text("Logga in med användarnamn och lösenord")'
USERNAME_INPUT = "input[name=user]"
PASSWORD_INPUT = "input[name=password]"
LOGIN_SUBMIT = "button[type=submit]"
DONT_STAY_SIGNED_IN = "input#idBtn_Back"
SITE_HEADER = "a[data-navigationcomponent=SiteHeader]"

MORE_OPTIONS_BUTTON = 'button[aria-label="Fler alternativ"]'
SCHEDULE_VIEWER_LINK = "a[name=Schemavisaren]"


class SessionEstablisher:
    """Logs a student into Skolplattformen on a fresh page."""

    def __init__(self, portal_url: str, *, timeout_ms: int = 30000) -> None:
        self.portal_url = portal_url
        self.timeout_ms = timeout_ms

    async def establish(self, page: Page, credentials: Credentials) -> Page:
        """Run the SSO login sequence and return the authenticated page.

        Args:
            page: Fresh Playwright page.
            credentials: E-mail for the first SSO step, then username/password.

        Raises:
            AuthenticationFailed: If any step times out or the landing page
                never shows the site header.
        """
        logger.info("authentication_started", username=credentials.username)

        try:
            await page.goto(
                self.portal_url, wait_until="networkidle", timeout=self.timeout_ms
            )
            await page.fill(EMAIL_INPUT, credentials.email)
            await page.click(EMAIL_SUBMIT)

            await page.click(STUDENT_REALM_LINK, timeout=self.timeout_ms)
            await page.click(PASSWORD_LOGIN_LINK, timeout=self.timeout_ms)

            await page.wait_for_selector(USERNAME_INPUT, timeout=self.timeout_ms)
            await page.fill(USERNAME_INPUT, credentials.username)
            await page.fill(PASSWORD_INPUT, credentials.password)
            await page.click(LOGIN_SUBMIT)

            await page.click(DONT_STAY_SIGNED_IN, timeout=self.timeout_ms)
            await page.wait_for_selector(SITE_HEADER, timeout=self.timeout_ms)

        except PlaywrightTimeoutError as e:
            logger.error("authentication_failed", reason="timeout", url=page.url)
            raise AuthenticationFailed(
                f"Login did not complete (stuck at {page.url}): {e}"
            ) from e
        except PlaywrightError as e:
            logger.error("authentication_error", error=str(e), type=type(e).__name__)
            raise AuthenticationFailed(f"Login failed: {e}") from e

        logger.info("authentication_succeeded")
        return page


async def open_schedule_viewer(
    page: Page,
    capture: NavigationCapture,
    *,
    timeout_ms: int = 30000,
    settle_seconds: float = 5,
) -> Page:
    """Open the schedule viewer popup with traffic capture in place.

    The capture is attached to the browser context before the click, so the
    popup's very first requests are observed. Traffic from `page` itself is
    excluded: its X-Scope belongs to the portal, not to the viewer.

    Returns:
        The viewer page, loaded to network idle.

    Raises:
        TransientError: If the popup does not open or load in time.
    """
    await capture.attach(page.context, exclude=page)

    try:
        await page.click(MORE_OPTIONS_BUTTON, timeout=timeout_ms)
        async with page.expect_popup(timeout=timeout_ms) as popup_info:
            await page.click(SCHEDULE_VIEWER_LINK, timeout=timeout_ms)
        viewer = await popup_info.value
        await viewer.wait_for_load_state("networkidle", timeout=timeout_ms)

        # Response bodies are read asynchronously; give them a moment to land
        await capture.settle(timeout=settle_seconds)
    except PlaywrightTimeoutError as e:
        logger.error("schedule_viewer_timeout", error=str(e))
        raise TransientError(f"Schedule viewer failed to open: {e}") from e
    finally:
        await capture.detach(page.context)

    logger.info("schedule_viewer_opened", url=viewer.url)
    return viewer
