from typing import Iterator, Optional

from bs4 import BeautifulSoup, Tag


def _clean(value) -> Optional[str]:
    if isinstance(value, list):   # multi-valued attributes such as class
        value = " ".join(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class Document:
    """
    Selector queries over a parsed HTML page (BeautifulSoup + lxml).
    Every query returns a stripped non-empty string or None.
    """

    def __init__(self, html: str):
        self.soup = BeautifulSoup(html or "", "lxml")

    def select_text(self, selector: str) -> Optional[str]:
        node = self.soup.select_one(selector)
        if node is None:
            return None
        if node.name == "meta":
            return _clean(node.get("content"))
        return _clean(node.get_text(" ", strip=True)) or _clean(node.get("content"))

    def select_image(self, selector: str) -> Optional[str]:
        node = self.soup.select_one(selector)
        if node is None:
            return None
        return self.image_source(node)

    @staticmethod
    def image_source(node: Tag) -> Optional[str]:
        if node.name == "meta":
            return _clean(node.get("content"))
        # primary source first, then lazy-load attributes
        for attr in ("src", "data-src", "data-zoomimage", "data-old-hires", "content"):
            value = _clean(node.get(attr))
            if value:
                return value
        return None

    def meta(self, prop: str) -> Optional[str]:
        for attr in ("property", "name"):
            for node in self.soup.find_all("meta", attrs={attr: prop}):
                value = _clean(node.get("content"))
                if value:
                    return value
        return None

    def title(self) -> Optional[str]:
        node = self.soup.find("title")
        return _clean(node.get_text()) if node else None

    def first_image(self) -> Optional[str]:
        node = self.soup.find("img")
        return self.image_source(node) if node else None

    def json_ld_blocks(self) -> Iterator[str]:
        for tag in self.soup.find_all("script", type=lambda t: t and "ld+json" in t):
            text = tag.string if tag.string is not None else tag.get_text()
            if text and text.strip():
                yield text
