import math
from datetime import datetime, timezone
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as a UTC ``YYYY-MM-DD HH:MM:SS`` string."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(TIMESTAMP_FORMAT)


class Product(BaseModel):
    """A single catalog item scraped from a listing page.

    All fields are kept as text, exactly as recovered from the markup.
    Fields that could not be recovered are empty strings.
    """

    model_config = ConfigDict(frozen=True)

    sku: str
    name: str = ""
    price: str = ""
    availability: str = ""
    brand: str = ""
    product_category: str = ""
    image_url: str = ""
    product_url: str = ""
    rating: str = ""
    review_count: str = ""


class CategoryInfo(BaseModel):
    """Category metadata advertised by the first listing page."""

    name: str = ""
    total_products: int = 0
    url: str = ""

    def total_pages(self, page_size: int = 24) -> int:
        """Number of listing pages needed to cover ``total_products``."""
        if self.total_products <= 0:
            return 0
        return math.ceil(self.total_products / page_size)


class RunStatistics(BaseModel):
    """Counters and timing for a single scrape run."""

    model_config = ConfigDict(populate_by_name=True)

    category_url: str = Field(default="", alias="categoryUrl")
    total_detected: int = Field(default=0, alias="totalDetected")
    total_saved: int = Field(default=0, alias="totalSaved")
    total_skipped: int = Field(default=0, alias="totalSkipped")
    missing_price: int = Field(default=0, alias="missingPrice")
    started_at: str = Field(default="", alias="startedAt")
    finished_at: str = Field(default="", alias="finishedAt")
    duration_seconds: float = Field(default=0.0, alias="durationSeconds")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ScrapeBundle(BaseModel):
    """Statistics plus products, handed to storage once per run."""

    statistics: RunStatistics
    products: List[Product] = Field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "statistics": self.statistics.to_dict(),
            "products": [product.model_dump() for product in self.products],
        }
