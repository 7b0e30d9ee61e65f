# HTML extraction for Benco listing pages.
# Turns one page of listing markup into Product records and reads the
# category metadata from the page's JSON-LD blocks.

import json
import re
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from catalog.models import CategoryInfo, Product

DEFAULT_BASE_URL = "https://shop.benco.com"

GRID_SELECTOR = ".product-grid"
PRODUCT_LINK_SELECTOR = 'a[href*="/Product/"]'
ADD_TO_CART_SELECTOR = "button.add-to-cart-button"
JSON_LD_SELECTOR = 'script[type="application/ld+json"]'

SKU_PATTERN = re.compile(r"/Product/([^/]+)/")

# Inline style rules leaking into link text, e.g. ".badge > span { color: red }"
STYLE_RULE_PATTERN = re.compile(r"\.[\w-]+\s*>\s*[\w-]+\s*\{[^}]*\}")
WHITESPACE_PATTERN = re.compile(r"\s+")

# Everything from the first match to the end of the name is noise
TRAILING_NOISE_PATTERN = re.compile(
    r"(No Longer Available|In Stock.*|Out of Stock|Estimated Ship Date.*|\d{4}-\d{3}).*$",
    re.IGNORECASE,
)

# Ordered: earlier patterns are more specific than later ones
AVAILABILITY_PATTERNS = [
    re.compile(
        r"Estimated Ship Date \d{1,2}/\d{1,2}/\d{2,4}(?: - \d{1,2}/\d{1,2}/\d{2,4})?",
        re.IGNORECASE,
    ),
    re.compile(r"In Stock in \w+", re.IGNORECASE),
    re.compile(r"In Stock", re.IGNORECASE),
    re.compile(r"Out of Stock", re.IGNORECASE),
    re.compile(r"No Longer Available", re.IGNORECASE),
    re.compile(r"Ships in \d+ (?:day|week|business day)s?", re.IGNORECASE),
]

# Arguments of the add-to-cart onclick handler: ..., `<name>`, '<price>', `<brand>`, ...
ONCLICK_PRICE_PATTERN = re.compile(r"`,\s*'([\d.]+)'")
ONCLICK_BRAND_PATTERN = re.compile(r"'[\d.]+',\s*`([^`]+)`")


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def clean_name(raw: str) -> str:
    """Normalize a product link's text into a display name.

    Collapses whitespace, removes leaked inline style rules and strips the
    availability, ship-date and stock-code noise the site appends to names.
    Applying it to an already cleaned name returns the name unchanged.
    """
    text = WHITESPACE_PATTERN.sub(" ", raw)
    # Removing one rule can join its neighbours into a new one
    previous = None
    while previous != text:
        previous = text
        text = STYLE_RULE_PATTERN.sub("", text)
    text = WHITESPACE_PATTERN.sub(" ", text).strip()
    return TRAILING_NOISE_PATTERN.sub("", text, count=1).strip()


def extract_sku(href: str) -> Optional[str]:
    """Return the identifier in a ``/Product/<id>/`` link, or None."""
    match = SKU_PATTERN.search(href)
    return match.group(1) if match else None


def extract_availability(text: str) -> str:
    """Return the first known stock phrasing found in ``text``."""
    for pattern in AVAILABILITY_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0).strip()
    return ""


def extract_price_and_brand(item: Tag) -> Tuple[str, str]:
    """Read price and brand from the item's add-to-cart onclick handler."""
    price = ""
    brand = ""

    button = item.select_one(ADD_TO_CART_SELECTOR)
    if button is None:
        return price, brand

    onclick = button.get("onclick") or ""

    price_match = ONCLICK_PRICE_PATTERN.search(onclick)
    if price_match:
        price = price_match.group(1)

    brand_match = ONCLICK_BRAND_PATTERN.search(onclick)
    if brand_match:
        brand = brand_match.group(1)

    return price, brand


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def iter_json_ld(soup: BeautifulSoup) -> Iterator[Dict[str, Any]]:
    """Yield every JSON-LD object embedded in the page.

    Blocks that are not valid JSON are ignored. A block holding a list
    yields each of its objects in turn.
    """
    for script in soup.select(JSON_LD_SELECTOR):
        raw = script.string or script.get_text()
        try:
            data = json.loads(raw)
        except ValueError:
            continue

        if isinstance(data, dict):
            yield data
        elif isinstance(data, list):
            for entry in data:
                if isinstance(entry, dict):
                    yield entry


def extract_ratings(soup: BeautifulSoup) -> Dict[str, Dict[str, str]]:
    """Map reviewed product names to their rating and review count."""
    ratings: Dict[str, Dict[str, str]] = {}

    for data in iter_json_ld(soup):
        if data.get("@type") != "AggregateRating":
            continue
        item_reviewed = data.get("itemReviewed") or {}
        if not isinstance(item_reviewed, dict):
            continue
        product_name = item_reviewed.get("name") or ""
        if product_name:
            ratings[product_name] = {
                "rating": _as_text(data.get("ratingValue")),
                "review_count": _as_text(data.get("ratingCount")),
            }

    return ratings


def parse_products(
    html: str,
    seen_skus: Set[str],
    category_name: str,
    base_url: str = DEFAULT_BASE_URL,
) -> Tuple[List[Product], int, int]:
    """Extract new products from one listing page.

    Args:
        html: Raw page markup
        seen_skus: SKUs already collected in this run; updated in place
        category_name: Category the page was requested for
        base_url: Site root used to build absolute product URLs

    Returns:
        Tuple of (products, detected, skipped). ``detected`` counts every
        item in the grid, ``skipped`` the items that produced no record
        (no product link, malformed link or duplicate SKU).
    """
    soup = make_soup(html)
    products: List[Product] = []
    detected = 0
    skipped = 0

    grid = soup.select_one(GRID_SELECTOR)
    if grid is None:
        return products, detected, skipped

    ratings = extract_ratings(soup)

    for item in grid.find_all("div", recursive=False):
        detected += 1

        link = item.select_one(PRODUCT_LINK_SELECTOR)
        if link is None:
            skipped += 1
            continue

        href = link.get("href") or ""
        sku = extract_sku(href)
        if sku is None or sku in seen_skus:
            skipped += 1
            continue

        seen_skus.add(sku)

        name = clean_name(link.get_text())

        image = item.find("img")
        image_url = (image.get("src") or "") if image is not None else ""

        price, brand = extract_price_and_brand(item)
        rating = ratings.get(name, {})

        products.append(
            Product(
                sku=sku,
                name=name,
                price=price,
                availability=extract_availability(item.get_text(" ")),
                brand=brand,
                product_category=category_name,
                image_url=image_url,
                product_url=urljoin(base_url, href.split("?")[0]),
                rating=rating.get("rating", ""),
                review_count=rating.get("review_count", ""),
            )
        )

    return products, detected, skipped


def get_category_info(html: str) -> CategoryInfo:
    """Read name, advertised item count and URL from the OfferCatalog block."""
    soup = make_soup(html)

    for data in iter_json_ld(soup):
        if data.get("@type") != "OfferCatalog":
            continue
        try:
            total = int(data.get("numberOfItems") or 0)
        except (TypeError, ValueError):
            total = 0
        return CategoryInfo(
            name=_as_text(data.get("name")),
            total_products=total,
            url=_as_text(data.get("url")),
        )

    return CategoryInfo()
