import logging
from typing import Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from catalog.scrapers.base import BaseScraper
from catalog.scrapers.parsing import GRID_SELECTOR


class BrowserScraper(BaseScraper):
    """Fetches listing pages through a headless Chromium instance.

    One browser and one tab are shared by every page of the run. They are
    created in :meth:`init` and torn down in :meth:`close`; use the scraper
    as a context manager so the browser is released even if the run aborts.
    """

    name = "browser"

    def __init__(self, settings, playwright_factory=sync_playwright):
        super().__init__(settings)
        self.user_agent = settings.HEADERS["user-agent"]
        self.navigation_timeout = settings.NAVIGATION_TIMEOUT_MS
        self.grid_timeout = settings.GRID_TIMEOUT_MS
        self._playwright_factory = playwright_factory
        self._playwright = None
        self.browser = None
        self.page = None
        self.logger = logging.getLogger("scraper.browser")

    def init(self) -> None:
        self.logger.info("Launching headless browser...")
        self._playwright = self._playwright_factory().start()
        self.browser = self._playwright.chromium.launch(
            headless=True,
            args=["--no-sandbox", "--disable-setuid-sandbox"],
        )
        self.page = self.browser.new_page(
            user_agent=self.user_agent,
            viewport={"width": 1280, "height": 800},
        )

    def close(self) -> None:
        if self.browser is not None:
            self.logger.info("Closing browser...")
            try:
                self.browser.close()
            finally:
                self.browser = None
                self.page = None
        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None

    def fetch_page(self, category: str, page: int) -> Optional[str]:
        if self.page is None:
            raise RuntimeError("BrowserScraper.init() must be called before fetch_page()")

        url = self.build_url(category, page)
        self.logger.debug("Navigating to page %d: %s", page, url)

        try:
            self.page.goto(url, wait_until="networkidle", timeout=self.navigation_timeout)
            # Wait for the product grid to be rendered
            self.page.wait_for_selector(GRID_SELECTOR, timeout=self.grid_timeout)
            return self.page.content()
        except PlaywrightError as e:
            self.logger.error("Page %d failed: %s", page, str(e))
            return None
