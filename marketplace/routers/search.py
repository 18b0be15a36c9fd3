"""Search API router."""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from marketplace.config import SEARCH_MIN_QUERY_LENGTH
from marketplace.dependencies import get_catalog_service
from marketplace.errors import ValidationError
from marketplace.schemas import SearchResults, SearchScope
from marketplace.services.catalog_service import CatalogService

router = APIRouter(prefix="/api", tags=["search"])


@router.get("/search", response_model=SearchResults)
async def search(
    q: Optional[str] = Query(None, description="Text to look for"),
    type: SearchScope = Query(SearchScope.ALL, description="services | products | providers | all"),
    catalog: CatalogService = Depends(get_catalog_service)
):
    """
    Search services, products and providers.

    An empty query is an error. Queries shorter than
    ``SEARCH_MIN_QUERY_LENGTH`` are not run and return empty results.
    """
    if q and len(q) < SEARCH_MIN_QUERY_LENGTH:
        return SearchResults()

    try:
        return catalog.search(q or "", type)
    except ValidationError as e:
        return JSONResponse(status_code=400, content=e.to_dict())
