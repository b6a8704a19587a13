import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from web_scraping.scrape.cache import ProductCache

from ..deps import get_cache, require_cache
from ..models import DEFAULT_WORKSPACE, DeleteResponse, FavoriteUpdate, ProductRecord

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[ProductRecord], response_model_exclude_none=True)
def list_products(
    workspace_id: str = Query(default=DEFAULT_WORKSPACE),
    favorites: bool = Query(default=False),
    cache: Optional[ProductCache] = Depends(get_cache),
):
    if cache is None:
        return []
    try:
        return cache.list(workspace_id, favorites_only=favorites)
    except Exception as exc:
        logger.exception("Failed to fetch products for workspace %s", workspace_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch products",
        ) from exc


@router.delete("/{product_id}", response_model=DeleteResponse)
def delete_product(
    product_id: str,
    workspace_id: str = Query(default=DEFAULT_WORKSPACE),
    cache: ProductCache = Depends(require_cache),
):
    try:
        deleted = cache.delete(product_id, workspace_id)
    except Exception as exc:
        logger.exception("Failed to delete %s", product_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete") from exc
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return DeleteResponse(id=product_id)


@router.patch("/{product_id}/favorite", response_model=ProductRecord, response_model_exclude_none=True)
def toggle_favorite(
    product_id: str,
    payload: FavoriteUpdate,
    cache: ProductCache = Depends(require_cache),
):
    try:
        record = cache.set_favorite(product_id, payload.workspace_id, payload.is_favorite)
    except Exception as exc:
        logger.exception("Failed to update favorite for %s", product_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update favorite",
        ) from exc
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return record
