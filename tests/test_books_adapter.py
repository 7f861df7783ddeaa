import pytest

from catalog_harvester.adapters.base import ItemRecord
from catalog_harvester.adapters.books import BooksToScrapeAdapter, rating_from_label
from catalog_harvester.errors import ParseError

from conftest import catalog_page

URL = "http://books.test/catalogue/page-1.html"


@pytest.mark.parametrize("label,expected", [
    ("One", 1), ("Two", 2), ("Three", 3), ("Four", 4), ("Five", 5),
    ("Zero", 0), ("five", 0), ("", 0), ("Six", 0),
])
def test_rating_labels(label, expected):
    assert rating_from_label(label) == expected


def test_parse_items_in_document_order():
    html = catalog_page([
        ("A Light in the Attic", "£51.77", "Three"),
        ("Tipping the Velvet", "£53.74", "One"),
        ("Mystery Label", "£10.00", "Eleven"),
    ])
    items = BooksToScrapeAdapter().parse_items(URL, html)
    assert items == [
        ItemRecord("A Light in the Attic", "£51.77", 3),
        ItemRecord("Tipping the Velvet", "£53.74", 1),
        ItemRecord("Mystery Label", "£10.00", 0),
    ]


def test_missing_star_element_rates_zero():
    html = catalog_page([("No Stars", "£1.00", None)])
    [item] = BooksToScrapeAdapter().parse_items(URL, html)
    assert item.rating == 0


def test_page_without_containers_is_a_parse_error():
    with pytest.raises(ParseError) as exc_info:
        BooksToScrapeAdapter().parse_items(URL, "<html><body><p>maintenance</p></body></html>")
    assert exc_info.value.url == URL


def test_container_without_title_is_a_parse_error():
    html = '<article class="product_pod"><h3><a href="x">x</a></h3><p class="price_color">£1</p></article>'
    with pytest.raises(ParseError):
        BooksToScrapeAdapter().parse_items(URL, html)


def test_container_without_price_is_a_parse_error():
    html = '<article class="product_pod"><h3><a href="x" title="T">T</a></h3></article>'
    with pytest.raises(ParseError):
        BooksToScrapeAdapter().parse_items(URL, html)


def test_total_pages_from_pager():
    html = catalog_page([("A", "£1", "One")], page=1, total=50)
    assert BooksToScrapeAdapter().parse_total_pages(URL, html, 1) == 50


def test_total_pages_without_pager_is_current_page():
    html = catalog_page([("A", "£1", "One")], page=4, total=None)
    assert BooksToScrapeAdapter().parse_total_pages(URL, html, 4) == 4


def test_malformed_pager_is_a_parse_error():
    html = '<ul class="pager"><li class="current">Page one</li></ul>'
    with pytest.raises(ParseError):
        BooksToScrapeAdapter().parse_total_pages(URL, html, 1)


def test_item_record_rejects_empty_title_and_bad_rating():
    with pytest.raises(ValueError):
        ItemRecord("", "£1", 1)
    with pytest.raises(ValueError):
        ItemRecord("T", "£1", 6)
