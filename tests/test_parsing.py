"""Tests for listing page extraction."""

import pytest

from catalog.models import CategoryInfo
from catalog.scrapers.parsing import (
    clean_name,
    extract_availability,
    extract_sku,
    get_category_info,
    parse_products,
)
from conftest import (
    aggregate_rating,
    item_with_malformed_link,
    item_without_link,
    listing_page,
    offer_catalog,
    product_item,
)


class TestParseProducts:
    """Grid traversal, skipping rules and field extraction."""

    def test_page_without_grid_returns_nothing(self):
        html = listing_page([product_item("A1")], grid=False)

        products, detected, skipped = parse_products(html, set(), "Acrylics & Relines")

        assert products == []
        assert detected == 0
        assert skipped == 0

    def test_empty_document(self):
        assert parse_products("", set(), "Acrylics & Relines") == ([], 0, 0)

    def test_extracts_all_fields(self):
        html = listing_page(
            [
                product_item(
                    "7310-123",
                    name="Lang Jet Acrylic Powder",
                    price="45.99",
                    brand="Lang Dental",
                    availability="In Stock in Ohio",
                    href="/Product/7310-123/lang-jet-acrylic?color=pink",
                )
            ],
            blocks=[aggregate_rating("Lang Jet Acrylic Powder", value=4.8, count=27)],
        )

        products, detected, skipped = parse_products(html, set(), "Acrylics & Relines")

        assert (detected, skipped) == (1, 0)
        product = products[0]
        assert product.sku == "7310-123"
        assert product.name == "Lang Jet Acrylic Powder"
        assert product.price == "45.99"
        assert product.brand == "Lang Dental"
        assert product.availability == "In Stock in Ohio"
        assert product.product_category == "Acrylics & Relines"
        assert product.image_url == "https://images.benco.com/p/item.jpg"
        assert product.product_url == "https://shop.benco.com/Product/7310-123/lang-jet-acrylic"
        assert product.rating == "4.8"
        assert product.review_count == "27"

    def test_item_without_product_link_is_skipped(self):
        html = listing_page([item_without_link(), product_item("A1")])

        products, detected, skipped = parse_products(html, set(), "Cat")

        assert [p.sku for p in products] == ["A1"]
        assert (detected, skipped) == (2, 1)

    def test_malformed_product_link_is_skipped(self):
        html = listing_page([item_with_malformed_link("X9")])
        seen = set()

        products, detected, skipped = parse_products(html, seen, "Cat")

        assert products == []
        assert (detected, skipped) == (1, 1)
        assert seen == set()

    def test_known_sku_is_skipped_without_growing_the_set(self):
        html = listing_page([product_item("A1"), product_item("B2")])
        seen = {"A1"}

        products, detected, skipped = parse_products(html, seen, "Cat")

        assert [p.sku for p in products] == ["B2"]
        assert (detected, skipped) == (2, 1)
        assert seen == {"A1", "B2"}

    def test_duplicates_within_a_page(self):
        html = listing_page([product_item("A1"), product_item("A1", name="Other")])

        products, detected, skipped = parse_products(html, set(), "Cat")

        assert len(products) == 1
        assert products[0].name == "Acrylic Resin"
        assert (detected, skipped) == (2, 1)

    def test_records_follow_document_order(self):
        skus = ["C3", "A1", "B2"]
        html = listing_page([product_item(sku) for sku in skus])

        products, _, _ = parse_products(html, set(), "Cat")

        assert [p.sku for p in products] == skus

    def test_only_direct_children_are_items(self):
        nested = '<div class="wrapper">' + product_item("A1") + product_item("B2") + "</div>"
        html = listing_page([nested])

        products, detected, skipped = parse_products(html, set(), "Cat")

        # The wrapper is one grid child; its first product link wins
        assert detected == 1
        assert skipped == 0
        assert [p.sku for p in products] == ["A1"]

    def test_missing_add_to_cart_leaves_price_and_brand_empty(self):
        html = listing_page([product_item("A1", price=None)])

        products, _, _ = parse_products(html, set(), "Cat")

        assert products[0].price == ""
        assert products[0].brand == ""

    def test_missing_image(self):
        html = listing_page([product_item("A1", image=None)])

        products, _, _ = parse_products(html, set(), "Cat")

        assert products[0].image_url == ""

    def test_absolute_product_link(self):
        html = listing_page([product_item("A1", href="https://shop.benco.com/Product/A1/slug?x=1")])

        products, _, _ = parse_products(html, set(), "Cat")

        assert products[0].product_url == "https://shop.benco.com/Product/A1/slug"

    def test_rating_requires_exact_name_match(self):
        html = listing_page(
            [product_item("A1", name="Acrylic Resin"), product_item("B2", name="Relining Kit")],
            blocks=[aggregate_rating("Acrylic Resin (Pink)"), aggregate_rating("Relining Kit", "3", "2")],
        )

        products, _, _ = parse_products(html, set(), "Cat")

        assert (products[0].rating, products[0].review_count) == ("", "")
        assert (products[1].rating, products[1].review_count) == ("3", "2")

    def test_zero_rating_is_kept(self):
        html = listing_page([product_item("A1")], blocks=[aggregate_rating("Acrylic Resin", value=0, count=0)])

        products, _, _ = parse_products(html, set(), "Cat")

        assert (products[0].rating, products[0].review_count) == ("0", "0")

    def test_invalid_json_ld_is_ignored(self):
        html = listing_page([product_item("A1")]).replace(
            "<head>",
            '<head><script type="application/ld+json">{not json</script>',
        )

        products, detected, _ = parse_products(html, set(), "Cat")

        assert detected == 1
        assert products[0].rating == ""

    def test_name_noise_is_removed(self):
        html = listing_page(
            [product_item("A1", name="Denture Base Resin 1234-567", availability="Out of Stock")]
        )

        products, _, _ = parse_products(html, set(), "Cat")

        assert products[0].name == "Denture Base Resin"
        assert products[0].availability == "Out of Stock"


class TestCleanName:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("  Acrylic \n\t Resin  ", "Acrylic Resin"),
            ("Acrylic Resin In Stock in Ohio", "Acrylic Resin"),
            ("Acrylic ResinIn Stock", "Acrylic Resin"),
            ("Acrylic Resin Out of Stock", "Acrylic Resin"),
            ("Acrylic Resin No Longer Available", "Acrylic Resin"),
            ("Acrylic Resin Estimated Ship Date 3/4/2025 - 3/9/2025", "Acrylic Resin"),
            ("Acrylic Resin 7310-123 Pink", "Acrylic Resin"),
            ("Acrylic .badge > span { color: red; } Resin", "Acrylic Resin"),
            ("Resin .p > q .a > b {z}{w}", "Resin"),
            ("", ""),
        ],
    )
    def test_clean_name(self, raw, expected):
        assert clean_name(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "Acrylic Resin",
            "  Lang   Jet .x > b {a:b}  Powder  In Stock in Texas",
            "Ortho-Jet 1 lb. Liquid 1234-567 Clear",
            ".a > b {} .c > d {}",
            "Resin .p > q .a > b {z}{w}",
            ".p > q .a > b {z}{w} Resin",
        ],
    )
    def test_clean_name_is_idempotent(self, raw):
        once = clean_name(raw)
        assert clean_name(once) == once


class TestFieldHelpers:
    @pytest.mark.parametrize(
        "href, expected",
        [
            ("/Product/7310-123/slug", "7310-123"),
            ("https://shop.benco.com/Product/ABC/slug?x=1", "ABC"),
            ("/Product/ABC", None),
            ("/Category/ABC/", None),
        ],
    )
    def test_extract_sku(self, href, expected):
        assert extract_sku(href) == expected

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Resin In Stock in Ohio Add to Cart", "In Stock in Ohio"),
            ("Resin in stock", "in stock"),
            ("Out of Stock", "Out of Stock"),
            ("Discontinued: No Longer Available", "No Longer Available"),
            ("Estimated Ship Date 3/4/25 - 3/9/25 In Stock", "Estimated Ship Date 3/4/25 - 3/9/25"),
            ("Estimated Ship Date 12/1/2025", "Estimated Ship Date 12/1/2025"),
            ("Ships in 3 business days", "Ships in 3 business days"),
            ("Ships in 1 week", "Ships in 1 week"),
            ("Call for pricing", ""),
        ],
    )
    def test_extract_availability(self, text, expected):
        assert extract_availability(text) == expected

    def test_regional_stock_wins_over_plain_stock(self):
        assert extract_availability("In Stock in Ohio") == "In Stock in Ohio"


class TestCategoryInfo:
    def test_reads_offer_catalog(self):
        html = listing_page([], blocks=[aggregate_rating("X"), offer_catalog(100)])

        info = get_category_info(html)

        assert info == CategoryInfo(
            name="Acrylics & Relines",
            total_products=100,
            url="https://shop.benco.com/Category/acrylics",
        )
        assert info.total_pages(24) == 5

    def test_first_catalog_wins(self):
        html = listing_page([], blocks=[offer_catalog(10, name="First"), offer_catalog(99, name="Second")])

        assert get_category_info(html).name == "First"

    def test_catalog_inside_list_block(self):
        html = listing_page([], blocks=[[aggregate_rating("X"), offer_catalog(48)]])

        assert get_category_info(html).total_products == 48

    def test_defaults_when_missing(self):
        info = get_category_info(listing_page([product_item("A1")]))

        assert info == CategoryInfo()
        assert info.total_pages() == 0

    def test_non_numeric_count(self):
        html = listing_page([], blocks=[offer_catalog("many")])

        assert get_category_info(html).total_products == 0

    def test_string_count(self):
        html = listing_page([], blocks=[offer_catalog("72")])

        info = get_category_info(html)
        assert info.total_products == 72
        assert info.total_pages() == 3
