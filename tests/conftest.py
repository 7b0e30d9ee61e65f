"""Shared fixtures and HTML builders for the scraper test suite."""

import json
from typing import Dict, Iterable, Optional

import pytest

from config.settings import Settings

ENV_VARS = [
    "CATEGORY_NAME",
    "MAX_PAGES",
    "MIN_DELAY",
    "MAX_DELAY",
    "OUTPUT_FILE",
    "STORAGE_TYPE",
    "DB_PATH",
    "SCRAPER_TYPE",
]


def product_item(
    sku: str,
    name: str = "Acrylic Resin",
    price: Optional[str] = "12.50",
    brand: str = "Lang Dental",
    availability: str = "In Stock",
    image: Optional[str] = "https://images.benco.com/p/item.jpg",
    href: Optional[str] = None,
) -> str:
    """Markup of one grid item the way the listing renders it."""
    href = href if href is not None else f"/Product/{sku}/acrylic-resin?ref=grid"
    image_html = f'<img src="{image}" alt="">' if image else ""
    button_html = ""
    if price is not None:
        onclick = f"addToCart(`{sku}`, `{name}`, '{price}', `{brand}`, 1)"
        button_html = f'<button class="add-to-cart-button" onclick="{onclick}">Add to Cart</button>'
    return f"""
    <div class="product-item">
      {image_html}
      <a href="{href}">
        <span class="name">{name}</span>
        <span class="stock">{availability}</span>
      </a>
      <div class="item-number">{sku}</div>
      {button_html}
    </div>"""


def item_without_link() -> str:
    return '<div class="product-item"><span>Promotional banner</span></div>'


def item_with_malformed_link(sku: str = "BAD1") -> str:
    return f'<div class="product-item"><a href="/Product/{sku}">Broken</a></div>'


def json_ld(data) -> str:
    return f'<script type="application/ld+json">{json.dumps(data)}</script>'


def offer_catalog(total: int, name: str = "Acrylics & Relines", url: str = "https://shop.benco.com/Category/acrylics") -> Dict:
    return {"@type": "OfferCatalog", "name": name, "numberOfItems": total, "url": url}


def aggregate_rating(name: str, value="4.5", count="12") -> Dict:
    return {
        "@type": "AggregateRating",
        "itemReviewed": {"@type": "Product", "name": name},
        "ratingValue": value,
        "ratingCount": count,
    }


def listing_page(items: Iterable[str], blocks: Iterable[Dict] = (), grid: bool = True) -> str:
    """Full listing document with optional JSON-LD blocks."""
    head = "".join(json_ld(block) for block in blocks)
    body = "".join(items)
    if grid:
        body = f'<div class="product-grid">{body}</div>'
    return f"<html><head>{head}</head><body><main>{body}</main></body></html>"


def page_of(skus, invalid: int = 0, blocks: Iterable[Dict] = ()) -> str:
    """Listing page with one valid item per SKU followed by ``invalid`` unusable items."""
    items = [product_item(sku, name=f"Product {sku}") for sku in skus]
    for i in range(invalid):
        items.append(item_without_link() if i % 2 == 0 else item_with_malformed_link(f"BAD{i}"))
    return listing_page(items, blocks=blocks)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove scraper settings from the environment."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.fixture
def settings(clean_env, tmp_path):
    """Settings pointing at temporary files, with no delays."""
    return Settings(
        min_delay=0,
        max_delay=0,
        output_file=str(tmp_path / "productos.json"),
        db_path=str(tmp_path / "productos.db"),
    )
