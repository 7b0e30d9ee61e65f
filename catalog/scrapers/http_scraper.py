import logging
from typing import Optional

import requests

from catalog.scrapers.base import BaseScraper


class HttpScraper(BaseScraper):
    """Fetches listing pages with plain HTTP requests.

    The site renders the product grid server side, so a single GET with
    browser-like headers is enough in most cases.
    """

    name = "http"

    def __init__(self, settings, session: Optional[requests.Session] = None):
        super().__init__(settings)
        self.timeout = settings.REQUEST_TIMEOUT
        self.session = session or requests.Session()
        self.session.headers.update(settings.HEADERS)
        self.logger = logging.getLogger("scraper.http")

    def fetch_page(self, category: str, page: int) -> Optional[str]:
        url = self.build_url(category, page)
        self.logger.debug("Fetching page %d: %s", page, url)

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()  # Raise exception for 4XX/5XX responses
            return response.text
        except requests.RequestException as e:
            self.logger.error("Page %d failed: %s", page, str(e))
            return None

    def close(self) -> None:
        self.session.close()
