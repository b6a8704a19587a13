from typing import List, Optional, Union

from pydantic import BaseModel

from web_scraping.scrape.schema import ProductRecord

DEFAULT_WORKSPACE = "default"


# --- POST /api/scrape ---
# `urls` is free text or a list of free-text blocks; URLs are discovered inside it.
class ScrapeRequest(BaseModel):
    urls: Optional[Union[str, List[str]]] = None
    workspace_id: str = DEFAULT_WORKSPACE


# --- PATCH /api/products/{id}/favorite ---
class FavoriteUpdate(BaseModel):
    workspace_id: str = DEFAULT_WORKSPACE
    is_favorite: bool


class DeleteResponse(BaseModel):
    success: bool = True
    id: str


__all__ = ["ScrapeRequest", "FavoriteUpdate", "DeleteResponse", "ProductRecord", "DEFAULT_WORKSPACE"]
