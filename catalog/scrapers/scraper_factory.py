from typing import Dict, Type
from catalog.scrapers.base import BaseScraper
from catalog.scrapers.http_scraper import HttpScraper
from catalog.scrapers.browser_scraper import BrowserScraper

class ScraperFactory:
    """Factory for creating the page fetching strategy named in the settings.

    The orchestrator only talks to the BaseScraper interface; this is the one
    place that knows which concrete transports exist.
    """

    # Map of scraper type names to scraper classes
    SCRAPERS: Dict[str, Type[BaseScraper]] = {
        "http": HttpScraper,
        "browser": BrowserScraper,
    }

    @classmethod
    def create_scraper(cls, scraper_type: str, settings) -> BaseScraper:
        """Create and return a scraper for the specified type.

        Args:
            scraper_type: Name of the transport ("http" or "browser"), case-insensitive
            settings: Application settings passed to the scraper

        Raises:
            ValueError: If the scraper type is not supported
        """
        key = (scraper_type or "").strip().lower()
        if key not in cls.SCRAPERS:
            supported = ", ".join(sorted(cls.SCRAPERS))
            raise ValueError(f"Unsupported scraper type: '{scraper_type}' (expected one of: {supported})")

        return cls.SCRAPERS[key](settings)
