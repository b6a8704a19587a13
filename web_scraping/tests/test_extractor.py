from __future__ import annotations

import json

from web_scraping.scrape.document import Document
from web_scraping.scrape.extractor import extract, extract_image, extract_price, extract_title, price_from_json_ld
from web_scraping.scrape.profiles import SiteProfile

PROFILE = SiteProfile(
    name="shop",
    domain_matchers=("shop.test",),
    title_selectors=(".pdp-name", "h1"),
    image_selectors=(".gallery img",),
    price_selectors=(".pdp-price",),
)


def _ld(obj) -> str:
    return f'<script type="application/ld+json">{json.dumps(obj)}</script>'


def _page(head: str = "", body: str = "") -> Document:
    return Document(f"<html><head>{head}</head><body>{body}</body></html>")


# ---------------------------------------------------------------- title


def test_title_profile_selector_wins():
    doc = _page(
        head='<meta property="og:title" content="OG Title"><title>Doc Title</title>',
        body='<h1>  Wool Coat  </h1>',
    )
    assert extract_title(doc, PROFILE) == "Wool Coat"


def test_title_falls_back_to_og_then_title_element():
    doc = _page(head='<meta property="og:title" content=" OG Title "><title>Doc</title>')
    assert extract_title(doc) == "OG Title"

    doc = _page(head="<title>\n  Doc Title \n</title>")
    assert extract_title(doc) == "Doc Title"


def test_meta_skips_empty_content_and_reads_name_form():
    doc = _page(head='<meta property="og:title" content=""><meta property="og:title" content="Second">')
    assert extract_title(doc) == "Second"

    doc = _page(head='<meta property="og:title" content="  "><meta name="og:title" content="Named"><title>Doc</title>')
    assert extract_title(doc) == "Named"

    doc = _page(head='<meta name="og:image" content="https://cdn.test/n.jpg">')
    assert extract_image(doc) == "https://cdn.test/n.jpg"


def test_title_literal_fallback():
    assert extract_title(_page(body="<p>nothing</p>")) == "No Title"
    assert extract_title(_page(head="<title>   </title>")) == "No Title"


# ---------------------------------------------------------------- image


def test_image_profile_selector_prefers_src_then_data_src():
    doc = _page(body='<div class="gallery"><img data-src="/lazy.jpg" src="/main.jpg"></div>')
    assert extract_image(doc, PROFILE) == "/main.jpg"

    doc = _page(body='<div class="gallery"><img data-src="/lazy.jpg"></div>')
    assert extract_image(doc, PROFILE) == "/lazy.jpg"


def test_image_falls_back_to_og_then_first_img():
    doc = _page(head='<meta property="og:image" content="https://cdn.test/og.jpg">', body='<img src="/a.jpg">')
    assert extract_image(doc) == "https://cdn.test/og.jpg"

    doc = _page(body='<img src="/a.jpg"><img src="/b.jpg">')
    assert extract_image(doc) == "/a.jpg"


def test_image_empty_when_nothing_found():
    assert extract_image(_page(body="<p>text only</p>")) == ""


# ---------------------------------------------------------------- price


def test_price_profile_selector_beats_json_ld():
    doc = _page(
        head=_ld({"@type": "Product", "offers": {"price": "10.00", "priceCurrency": "USD"}}),
        body='<span class="pdp-price"> $12.50 </span>',
    )
    assert extract_price(doc, PROFILE) == "$12.50"


def test_price_json_ld_beats_meta():
    doc = _page(
        head=(
            _ld({"@type": "Product", "offers": {"price": "10.00", "priceCurrency": "USD"}})
            + '<meta property="product:price:amount" content="99">'
        ),
    )
    assert extract_price(doc) == "USD 10.00"


def test_price_meta_with_and_without_currency():
    doc = _page(
        head='<meta property="product:price:amount" content="25.00"><meta property="product:price:currency" content="EUR">'
    )
    assert extract_price(doc) == "EUR25.00"

    doc = _page(head='<meta property="product:price:amount" content="25.00">')
    assert extract_price(doc) == "$25.00"


def test_price_check_site_when_nothing_matches():
    assert extract_price(_page(body="<p>call us</p>"), PROFILE) == "Check Site"


def test_json_ld_offers_array_and_low_price():
    doc = _page(head=_ld({"@type": "ProductGroup", "offers": [{"lowPrice": 40, "priceCurrency": "GBP"}, {"price": 1}]}))
    assert price_from_json_ld(doc) == "GBP 40"


def test_json_ld_zero_price_falls_through_to_low_price():
    doc = _page(head=_ld({"@type": "Product", "offers": {"price": 0, "lowPrice": 12, "priceCurrency": "USD"}}))
    assert price_from_json_ld(doc) == "USD 12"

    doc = _page(
        head=_ld({"@type": "Product", "offers": {"price": 0}})
        + '<meta property="product:price:amount" content="9">'
    )
    assert extract_price(doc) == "$9"


def test_json_ld_without_currency_is_bare_amount():
    doc = _page(head=_ld({"@type": "Product", "offers": {"price": 19.99}}))
    assert price_from_json_ld(doc) == "19.99"


def test_json_ld_array_payload_and_graph():
    doc = _page(head=_ld([{"@type": "BreadcrumbList"}, {"@type": "Product", "offers": {"price": "5"}}]))
    assert price_from_json_ld(doc) == "5"

    doc = _page(head=_ld({"@graph": [{"@type": "WebPage"}, {"@type": ["Product"], "offers": {"price": "7"}}]}))
    assert price_from_json_ld(doc) == "7"


def test_malformed_json_ld_is_skipped():
    doc = _page(
        head=(
            '<script type="application/ld+json">{not json,,}</script>'
            + _ld({"@type": "Product", "offers": {"price": "8.00", "priceCurrency": "USD"}})
        )
    )
    assert price_from_json_ld(doc) == "USD 8.00"


def test_malformed_json_ld_falls_through_to_meta():
    doc = _page(
        head='<script type="application/ld+json">{"@type": "Product",</script>'
        '<meta property="product:price:amount" content="3">'
    )
    assert extract_price(doc) == "$3"


def test_first_json_ld_price_wins_over_later_blocks():
    doc = _page(
        head=(
            _ld({"@type": "Product", "offers": {"price": "1.00", "priceCurrency": "USD"}})
            + _ld({"@type": "Product", "offers": {"price": "2.00", "priceCurrency": "USD"}})
        )
    )
    assert price_from_json_ld(doc) == "USD 1.00"


def test_json_ld_non_product_types_are_ignored():
    doc = _page(head=_ld({"@type": "Offer", "price": "3"}) + _ld({"@type": "Organization"}))
    assert price_from_json_ld(doc) is None


def test_meta_price_selector_reads_content_attribute():
    prof = SiteProfile(name="m", domain_matchers=("m.test",), price_selectors=("meta[itemprop='price']",))
    doc = _page(head='<meta itemprop="price" content="77.00">')
    assert extract_price(doc, prof) == "77.00"


# ---------------------------------------------------------------- full


def test_extract_returns_all_fields_with_size_placeholder():
    doc = _page(
        head='<meta property="og:title" content="Boots"><meta property="og:image" content="https://cdn.test/b.jpg">',
    )
    assert extract(doc) == {
        "title": "Boots",
        "image": "https://cdn.test/b.jpg",
        "price": "Check Site",
        "size": "Visit Site",
    }
