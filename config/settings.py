import os
from functools import lru_cache
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Application settings loaded from environment variables with defaults.

    Every value can be set through the environment (or a ``.env`` file) and
    overridden per run with keyword arguments, which is how the CLI options
    are applied on top of the environment.
    """

    # Project metadata
    PROJECT_NAME = "Benco Catalog Scraper"
    PROJECT_VERSION = "0.1.0"

    # Target site
    BASE_URL = "https://shop.benco.com"
    SEARCH_PATH = "/Search"
    PAGE_SIZE = 24  # Products per listing page on the site

    # Timeouts
    REQUEST_TIMEOUT = 30  # seconds
    NAVIGATION_TIMEOUT_MS = 30000
    GRID_TIMEOUT_MS = 10000

    HEADERS = {
        "accept": "text/html,application/xhtml+xml,application/xml;q=0.9",
        "accept-language": "en-US,en;q=0.9",
        "user-agent": (
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/142.0.0.0 Safari/537.36"
        ),
    }

    def __init__(self, **overrides):
        self.CATEGORY_NAME = os.getenv("CATEGORY_NAME", "Acrylics & Relines")
        self.MAX_PAGES = int(os.getenv("MAX_PAGES", "2"))
        self.MIN_DELAY = float(os.getenv("MIN_DELAY", "1"))
        self.MAX_DELAY = float(os.getenv("MAX_DELAY", "3"))
        self.OUTPUT_FILE = os.getenv("OUTPUT_FILE", "productos.json")
        self.STORAGE_TYPE = os.getenv("STORAGE_TYPE", "json")
        self.DB_PATH = os.getenv("DB_PATH", "productos.db")
        self.SCRAPER_TYPE = os.getenv("SCRAPER_TYPE", "http")

        for key, value in overrides.items():
            attr = key.upper()
            if not hasattr(self, attr):
                raise ValueError(f"Unknown setting: {key}")
            if value is not None:
                setattr(self, attr, value)

        if self.MAX_PAGES < 0:
            raise ValueError(f"MAX_PAGES must be 0 (auto) or positive, got {self.MAX_PAGES}")
        if self.MIN_DELAY < 0 or self.MIN_DELAY > self.MAX_DELAY:
            raise ValueError(
                f"Invalid delay bounds: MIN_DELAY={self.MIN_DELAY}, MAX_DELAY={self.MAX_DELAY}"
            )

    @property
    def SEARCH_URL(self) -> str:
        """Full URL of the listing search endpoint."""
        return f"{self.BASE_URL}{self.SEARCH_PATH}"


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
