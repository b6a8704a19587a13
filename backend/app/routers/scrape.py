from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from web_scraping.scrape.scrape import EmptyInputError, ScrapeOrchestrator

from ..deps import get_orchestrator
from ..models import ProductRecord, ScrapeRequest

router = APIRouter()


@router.post("/scrape", response_model=List[ProductRecord], response_model_exclude_none=True)
async def scrape(payload: ScrapeRequest, orchestrator: ScrapeOrchestrator = Depends(get_orchestrator)):
    """
    Find every URL in the submitted text and return one record per URL, in the
    order the URLs appear. Broken links come back as error records.
    """
    try:
        return await orchestrator.scrape_batch(payload.urls, payload.workspace_id)
    except EmptyInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
