# This file defines the abstract base class for all page fetching strategies
# It establishes a common interface that the orchestrator relies on, whatever the transport

import abc  # The Abstract Base Classes module enables the creation of abstract classes
import base64
import gzip
import json
from typing import List, Optional, Set, Tuple
from urllib.parse import urlencode

from catalog.models import CategoryInfo, Product
from catalog.scrapers import parsing


class BaseScraper(abc.ABC):
    """Base class for listing page scrapers.

    Concrete scrapers only decide how a page is retrieved (plain HTTP or a
    rendering browser). URL building and HTML extraction are shared here, so
    both transports produce identical records for identical markup.

    Scrapers are context managers: ``with scraper:`` calls :meth:`init` and
    guarantees :meth:`close` runs on every exit path, so resources held for
    the whole run are released exactly once.
    """

    name = "base"

    def __init__(self, settings):
        """Initialize the scraper.

        Args:
            settings: Application settings (see ``config.settings.Settings``)
        """
        self.settings = settings
        self.base_url = settings.BASE_URL

    def init(self) -> None:
        """Acquire run-wide resources. No-op unless a transport needs it."""

    def close(self) -> None:
        """Release run-wide resources. Must be safe to call more than once."""

    def __enter__(self):
        try:
            self.init()
        except Exception:
            # Release whatever was acquired before init() failed
            self.close()
            raise
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @abc.abstractmethod
    def fetch_page(self, category: str, page: int) -> Optional[str]:
        """Retrieve one listing page.

        Args:
            category: Category display name, e.g. "Acrylics & Relines"
            page: 1-based page number

        Returns:
            The page HTML, or None if the page could not be retrieved.
            Failures are logged by the implementation and never raised.
        """
        raise NotImplementedError("Concrete scraper classes must implement fetch_page() method")

    def build_query_param(self, category: str, page: int = 1) -> str:
        """Encode the search query the site expects in its ``q`` parameter.

        The query object is serialized as compact JSON, gzip-compressed and
        base64-encoded.
        """
        data = {
            "Categorization": {
                "Tab": category,
                "TabId": 0,
                "CategoryId": 0,
            },
            "Page": page,
            "GroupSimilarItems": True,
            "AllowAutoCorrectSubstitution": False,
            "Source": "Categories." + category.replace(" ", "").replace("&", ""),
            "ShowResultsAsGrid": True,
            "IncludePricing": False,
            "IsCompleteCart": False,
            "IsGeneralSuggestion": False,
            "SelectionCriterionDescription": category,
        }

        payload = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
        compressed = gzip.compress(payload.encode("utf-8"))
        return base64.b64encode(compressed).decode("ascii")

    def build_url(self, category: str, page: int) -> str:
        query = urlencode({"q": self.build_query_param(category, page)})
        return f"{self.settings.SEARCH_URL}?{query}"

    def parse_products(
        self, html: str, seen_skus: Set[str], category_name: str
    ) -> Tuple[List[Product], int, int]:
        return parsing.parse_products(html, seen_skus, category_name, base_url=self.base_url)

    def get_category_info(self, html: str) -> CategoryInfo:
        return parsing.get_category_info(html)
