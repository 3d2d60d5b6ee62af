import asyncio
from fakes import FakeElement, catalog_node, non_catalog_node
from wishlistwizard.core.constants import BYLINE_SELECTOR, OPTION_SELECTOR
from wishlistwizard.extract.items import ItemExtractor


def extract(node):
    return asyncio.run(ItemExtractor().extract(node))


def test_catalog_item_fields():
    item = extract(catalog_node())
    assert item.name == "Desk Lamp"
    assert item.manufacturer == "by Acme"
    assert item.options == ["Black", "US Plug"]
    assert item.product_link == "https://www.amazon.com/dp/B000X?th=1"
    assert item.external_link == ""


def test_blank_options_skipped_and_order_kept():
    item = extract(catalog_node(options=("Size: L", "   ", "Color: Red")))
    assert item.options == ["Size: L", "Color: Red"]


def test_catalog_item_without_byline_or_options():
    item = extract(catalog_node(byline=None, options=()))
    assert item.manufacturer == ""
    assert item.options == []


def test_malformed_href_keeps_item_without_link():
    item = extract(catalog_node(href="http://[broken"))
    assert item is not None
    assert item.name == "Desk Lamp"
    assert item.product_link == ""


def test_non_catalog_url_becomes_external_link():
    item = extract(non_catalog_node(" https://maker.example/lamp "))
    assert item.external_link == "https://maker.example/lamp"
    assert item.name == ""
    assert item.product_link == ""
    assert item.manufacturer == ""
    assert item.options == []


def test_non_catalog_text_becomes_name():
    item = extract(non_catalog_node("Handmade mug from the fair"))
    assert item.name == "Handmade mug from the fair"
    assert item.external_link == ""


def test_non_catalog_url_with_spaces_is_a_name():
    item = extract(non_catalog_node("https://maker.example/lamp and more"))
    assert item.name == "https://maker.example/lamp and more"
    assert item.external_link == ""


def test_non_catalog_ignores_catalog_fields():
    node = non_catalog_node("Gift card")
    node.children[BYLINE_SELECTOR] = [FakeElement(text="by Someone")]
    node.children[OPTION_SELECTOR] = [FakeElement(text="Red")]
    item = extract(node)
    assert item.manufacturer == ""
    assert item.options == []


def test_empty_nodes_are_dropped():
    nodes = [
        FakeElement(),
        catalog_node(name=None, byline="by Nobody"),
        non_catalog_node("   "),
        catalog_node(name="", href=None),
    ]
    assert asyncio.run(ItemExtractor().extract_all(nodes)) == []


def test_extract_all_never_returns_empty_items():
    nodes = [catalog_node(), FakeElement(), non_catalog_node("https://x.example/a"), catalog_node(name="", href=None)]
    items = asyncio.run(ItemExtractor().extract_all(nodes))
    assert len(items) == 2
    for item in items:
        assert item.name or item.product_link or item.external_link
