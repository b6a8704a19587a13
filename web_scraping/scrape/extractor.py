from typing import Any, Dict, Iterable, Optional

import orjson

from .document import Document
from .profiles import SiteProfile
from .schema import CHECK_SITE, NO_TITLE, SIZE_PLACEHOLDER

PRODUCT_TYPES = ("Product", "ProductGroup")
DEFAULT_META_CURRENCY = "$"


def _safe_json_loads(text: str):
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError:
        return None


def _is_product(node: Any) -> bool:
    if not isinstance(node, dict):
        return False
    t = node.get("@type")
    if isinstance(t, list):
        return any(x in PRODUCT_TYPES for x in t)
    return t in PRODUCT_TYPES


def _product_nodes(data: Any) -> Iterable[Dict[str, Any]]:
    """
    Yield every schema.org Product/ProductGroup node in a JSON-LD payload.
    Handles a root object, a root array, and @graph containers.
    """
    nodes = data if isinstance(data, list) else [data]
    for node in nodes:
        if not isinstance(node, dict):
            continue
        if _is_product(node):
            yield node
        graph = node.get("@graph")
        if isinstance(graph, list):
            for child in graph:
                if _is_product(child):
                    yield child


def _offer_price(product: Dict[str, Any]) -> Optional[str]:
    offers = product.get("offers")
    if isinstance(offers, list):
        offers = offers[0] if offers else None
    if not isinstance(offers, dict):
        return None

    # a zero or empty price is treated as missing and falls through to lowPrice
    amount = offers.get("price") or offers.get("lowPrice")
    if not amount:
        return None

    currency = offers.get("priceCurrency")
    if isinstance(currency, str) and currency.strip():
        return f"{currency.strip()} {amount}"
    return str(amount)


def price_from_json_ld(doc: Document) -> Optional[str]:
    # First match wins: a later block never overrides an earlier price.
    for block in doc.json_ld_blocks():
        data = _safe_json_loads(block)
        if data is None:
            continue
        for product in _product_nodes(data):
            price = _offer_price(product)
            if price:
                return price
    return None


def price_from_meta(doc: Document) -> Optional[str]:
    amount = doc.meta("product:price:amount")
    if not amount:
        return None
    currency = doc.meta("product:price:currency") or DEFAULT_META_CURRENCY
    return f"{currency}{amount}"


def _first_text(doc: Document, selectors: Iterable[str]) -> Optional[str]:
    for sel in selectors:
        value = doc.select_text(sel)
        if value:
            return value
    return None


def _first_image(doc: Document, selectors: Iterable[str]) -> Optional[str]:
    for sel in selectors:
        value = doc.select_image(sel)
        if value:
            return value
    return None


def extract_title(doc: Document, profile: Optional[SiteProfile] = None) -> str:
    title = (
        (profile and _first_text(doc, profile.title_selectors))
        or doc.meta("og:title")
        or doc.title()
    )
    return title.strip() if title else NO_TITLE


def extract_image(doc: Document, profile: Optional[SiteProfile] = None) -> str:
    return (
        (profile and _first_image(doc, profile.image_selectors))
        or doc.meta("og:image")
        or doc.first_image()
        or ""
    )


def extract_price(doc: Document, profile: Optional[SiteProfile] = None) -> str:
    return (
        (profile and _first_text(doc, profile.price_selectors))
        or price_from_json_ld(doc)
        or price_from_meta(doc)
        or CHECK_SITE
    )


def extract_size(doc: Document) -> str:
    return SIZE_PLACEHOLDER


def extract(doc: Document, profile: Optional[SiteProfile] = None) -> Dict[str, str]:
    return {
        "title": extract_title(doc, profile),
        "image": extract_image(doc, profile),
        "price": extract_price(doc, profile),
        "size": extract_size(doc),
    }
