import logging
import random
import time
from datetime import datetime, timezone
from typing import List, Optional, Set

from catalog.models import CategoryInfo, Product, RunStatistics, ScrapeBundle, format_timestamp
from catalog.scrapers.base import BaseScraper
from catalog.scrapers.scraper_factory import ScraperFactory
from catalog.storage.base import BaseStorage
from catalog.storage.storage_factory import StorageFactory

logger = logging.getLogger("orchestrator")


def random_delay(min_delay: float, max_delay: float) -> float:
    """Sleep for a random number of seconds between the bounds and return it."""
    delay = random.uniform(min_delay, max_delay)
    logger.info("  Waiting %.1fs...", delay)
    time.sleep(delay)
    return delay


class Orchestrator:
    """Drives one scrape run: page loop, accumulation, statistics and saving.

    Pages are fetched strictly one after another with a random politeness
    delay between them. A page that cannot be fetched is skipped; nothing
    else in the loop is retried.
    """

    def __init__(
        self,
        settings,
        scraper: Optional[BaseScraper] = None,
        storage: Optional[BaseStorage] = None,
    ):
        """Build the run from settings.

        Both strategies are created here, so an unsupported scraper or
        storage type raises ValueError before any request is made.
        """
        self.settings = settings
        if scraper is None:
            scraper = ScraperFactory.create_scraper(settings.SCRAPER_TYPE, settings)
        if storage is None:
            storage = StorageFactory.create_storage(settings.STORAGE_TYPE, settings)
        self.scraper = scraper
        self.storage = storage
        self.stats = RunStatistics()
        self.category_info = CategoryInfo()
        self.saved = False

    def run(self) -> ScrapeBundle:
        settings = self.settings
        start_time = datetime.now(timezone.utc)
        self.stats = RunStatistics(started_at=format_timestamp(start_time))
        self.saved = False

        logger.info("=" * 50)
        logger.info("Category: %s", settings.CATEGORY_NAME)
        logger.info("Max pages: %s", settings.MAX_PAGES if settings.MAX_PAGES else "auto")
        logger.info("Delay: %s-%ss", settings.MIN_DELAY, settings.MAX_DELAY)
        logger.info("Scraper: %s", self.scraper.name.upper())
        logger.info("=" * 50)

        products: List[Product] = []
        seen_skus: Set[str] = set()

        with self.scraper:
            self._scrape_pages(products, seen_skus)

        self.stats.missing_price = sum(1 for product in products if product.price == "")

        end_time = datetime.now(timezone.utc)
        self.stats.finished_at = format_timestamp(end_time)
        self.stats.duration_seconds = round((end_time - start_time).total_seconds(), 2)

        bundle = ScrapeBundle(statistics=self.stats, products=products)

        self.saved = self.storage.save(bundle)
        if self.saved:
            logger.info("Saved to: %s", self.storage.location)

        return bundle

    def _scrape_pages(self, products: List[Product], seen_skus: Set[str]) -> None:
        settings = self.settings
        category = settings.CATEGORY_NAME
        pages_to_scrape = settings.MAX_PAGES
        # In auto mode we need page 1 before we know the real page count
        if pages_to_scrape == 0:
            pages_to_scrape = 1

        page = 1
        while page <= pages_to_scrape:
            logger.info("[Page %d/%d]", page, pages_to_scrape)

            html = self.scraper.fetch_page(category, page)

            if html is None:
                logger.warning("  [SKIP] Page %d failed, continuing...", page)
            else:
                if page == 1:
                    pages_to_scrape = self._handle_first_page(html, pages_to_scrape)

                page_products, detected, skipped = self.scraper.parse_products(
                    html, seen_skus, category
                )

                self.stats.total_detected += detected
                self.stats.total_skipped += skipped
                self.stats.total_saved += len(page_products)
                products.extend(page_products)

                logger.info(
                    "  Detected: %d | Saved: %d | Skipped: %d",
                    detected, len(page_products), skipped,
                )

                if page < pages_to_scrape:
                    random_delay(settings.MIN_DELAY, settings.MAX_DELAY)
            page += 1

    def _handle_first_page(self, html: str, pages_to_scrape: int) -> int:
        self.category_info = self.scraper.get_category_info(html)
        self.stats.category_url = self.category_info.url

        total_pages = self.category_info.total_pages(self.settings.PAGE_SIZE)
        logger.info("  Category: %s", self.category_info.name)
        logger.info(
            "  Total on site: %d products (%d pages)",
            self.category_info.total_products, total_pages,
        )

        if self.settings.MAX_PAGES == 0:
            return total_pages
        return pages_to_scrape
