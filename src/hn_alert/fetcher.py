from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from .config import FETCH_TIMEOUT_MS, USER_AGENT
from .errors import FetchError
from .logging_utils import logger


def fetch_listing(url: str, *, timeout_ms: int = FETCH_TIMEOUT_MS) -> str:
    """GET ``url`` and return the body text; anything but a 2xx status is a FetchError."""
    logger.info("Requesting listing page", extra={"event": "fetch", "url": url})

    try:
        with sync_playwright() as p:
            request = p.request.new_context(user_agent=USER_AGENT)
            try:
                response = request.get(url, timeout=timeout_ms)
                if not response.ok:
                    raise FetchError(url, f"bad status {response.status}")
                body = response.text()
            finally:
                request.dispose()
    except PlaywrightError as exc:
        raise FetchError(url, str(exc)) from exc

    logger.info(
        "Listing page fetched",
        extra={"event": "fetch_complete", "url": url, "count": len(body)},
    )
    return body
