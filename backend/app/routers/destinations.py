"""Multi-source destination search."""

from fastapi import APIRouter, Query

from app.schemas.destination import SearchResult
from app.services.aggregation_coordinator import aggregation_coordinator

router = APIRouter()


@router.get("/search", response_model=SearchResult)
async def search_destinations(query: str = Query(..., min_length=1)):
    """Search every destination source; falls back to curated picks when all fail."""
    return await aggregation_coordinator.aggregate(query)
