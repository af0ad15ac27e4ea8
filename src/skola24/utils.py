"""Shared browser setup for the login and schedule viewer pages."""

from playwright.async_api import BrowserContext, Route

from skola24.logging import get_logger

log = get_logger(__name__)

BLOCKED_RESOURCE_TYPES: frozenset[str] = frozenset({"image", "font", "media"})

DEFAULT_TIMEOUT_MS = 30000


async def configure_context_for_scraping(
    context: BrowserContext, *, block_resources: bool = False
) -> None:
    """Set default timeouts and optionally drop heavy resources.

    Args:
        context: Playwright BrowserContext used for the whole run.
        block_resources: If True, abort image, font and media requests.
            Stylesheets are kept: the SSO pages hide inputs without them.
    """

    async def _block_resources(route: Route) -> None:
        if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
            await route.abort()
        else:
            await route.continue_()

    if block_resources:
        await context.route("**/*", _block_resources)
        log.debug("resource_blocking_enabled", types=sorted(BLOCKED_RESOURCE_TYPES))

    context.set_default_timeout(DEFAULT_TIMEOUT_MS)
    context.set_default_navigation_timeout(DEFAULT_TIMEOUT_MS)
