from pydantic import BaseModel
from typing import Optional
from datetime import datetime

NO_TITLE = "No Title"
CHECK_SITE = "Check Site"
SIZE_PLACEHOLDER = "Visit Site"   # size extraction is not implemented
ERROR_TITLE = "Error Loading Product"
ERROR_MESSAGE = "Failed to load product data"


class ProductRecord(BaseModel):
    id: str                      # md5 of the url, see cache.key_for
    url: str                     # as discovered, never validated
    title: str = NO_TITLE
    image: str = ""
    price: str = CHECK_SITE
    size: str = SIZE_PLACEHOLDER
    is_favorite: bool = False    # owned by the CRUD layer
    workspace_id: str = "default"
    error: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def error_stub(cls, id: str, url: str, workspace_id: str, message: str = ERROR_MESSAGE) -> "ProductRecord":
        return cls(
            id=id,
            url=url,
            workspace_id=workspace_id,
            error=message,
            title=ERROR_TITLE,
            image="",
            price="",
            size="",
        )
