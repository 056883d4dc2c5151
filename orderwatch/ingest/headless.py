"""Headless browser capture of JSON network responses."""

import logging
import re

from playwright.async_api import Response, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from orderwatch.config import settings
from orderwatch.ingest.base import BasePayloadFetcher, FetchError

logger = logging.getLogger(__name__)

# Responses worth reading: anything that smells like an order book
MARKET_URL_RE = re.compile(r"(orderbook|order-book|book|orders|bids?|buy)", re.IGNORECASE)

JSON_CONTENT_TYPE = "application/json"

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
]


def looks_like_market_url(url: str) -> bool:
    return MARKET_URL_RE.search(url) is not None


def is_market_json(response: Response) -> bool:
    """Check whether a response is a JSON body from a market-looking endpoint."""
    content_type = response.headers.get("content-type", "")
    return JSON_CONTENT_TYPE in content_type and looks_like_market_url(response.url)


class HeadlessNetworkFetcher(BasePayloadFetcher):
    """Loads a page in Chromium and keeps the JSON bodies it fetched."""

    def __init__(
        self,
        headless: bool | None = None,
        navigation_timeout_ms: int | None = None,
        settle_ms: int | None = None,
    ):
        """
        Initialize the fetcher.

        Args:
            headless: Run Chromium without a window (defaults to settings)
            navigation_timeout_ms: Page navigation timeout
            settle_ms: Time to wait after DOM load for XHRs to complete
        """
        self.headless = settings.headless if headless is None else headless
        self.navigation_timeout_ms = navigation_timeout_ms or settings.navigation_timeout_ms
        self.settle_ms = settings.page_settle_ms if settle_ms is None else settle_ms

    async def capture(self, url: str) -> list[str]:
        """
        Capture market JSON responses made while loading a page.

        One browser per call; it is always closed before returning.
        """
        responses: list[Response] = []

        def on_response(response: Response) -> None:
            if is_market_json(response):
                responses.append(response)

        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=self.headless, args=BROWSER_ARGS)
            try:
                page = await browser.new_page()
                page.on("response", on_response)

                try:
                    await page.goto(
                        url,
                        wait_until="domcontentloaded",
                        timeout=self.navigation_timeout_ms,
                    )
                except PlaywrightTimeoutError as e:
                    raise FetchError(url, "navigation timed out") from e
                except PlaywrightError as e:
                    raise FetchError(url, str(e)) from e

                await page.wait_for_timeout(self.settle_ms)

                texts = []
                for response in responses:
                    try:
                        texts.append(await response.text())
                    except PlaywrightError as e:
                        logger.debug(f"Could not read body of {response.url}: {e}")
            finally:
                await browser.close()

        logger.debug(f"Captured {len(texts)} JSON payloads from {url}")
        return texts
