from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env", override=False)

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from .db.repo import get_repository
from .errors import DataSourceUnavailable
from .models.property import (
    ComparisonResponse,
    FavoriteIdsResponse,
    FavoriteToggleResponse,
    PROPERTY_TYPES,
    PropertyListResponse,
    PropertyListing,
    STATUS_TYPES,
)
from .models.search import DEFAULT_SORT, SearchCriteria
from .services.comparison import ComparisonError, MAX_COMPARE, comparison_rows
from .services.favorites import get_ledger
from .services.property_service import PropertyService
from .services.search import FAVORITE_SORT_OPTIONS, SORT_OPTIONS
from .utils.logging import fields, get_logger

LOGGER = get_logger("api")

app = FastAPI(title="HomeFinder")
router = APIRouter(prefix="/api")


def get_property_service() -> PropertyService:
    return PropertyService(get_repository(), get_ledger())


@app.exception_handler(DataSourceUnavailable)
def data_source_unavailable(request: Request, exc: DataSourceUnavailable):
    LOGGER.warning(fields("data_source_unavailable", path=request.url.path, source=exc.source, error=exc))
    return JSONResponse(
        status_code=503,
        content={"detail": "Failed to load properties. Please try again.", "retryable": True},
    )


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/meta")
def meta():
    return {
        "property_types": list(PROPERTY_TYPES),
        "statuses": list(STATUS_TYPES),
        "sort_options": [{"value": value, "label": label} for value, label in SORT_OPTIONS],
        "favorite_sort_options": [{"value": value, "label": label} for value, label in FAVORITE_SORT_OPTIONS],
        "max_compare": MAX_COMPARE,
    }


@router.get("/properties", response_model=PropertyListResponse)
def list_props(
    search: Optional[str] = Query(None),
    price_min: Optional[str] = Query(None),
    price_max: Optional[str] = Query(None),
    bedrooms: Optional[str] = Query(None),
    bathrooms: Optional[str] = Query(None),
    property_type: Optional[List[str]] = Query(None),
    status: Optional[List[str]] = Query(None),
    sort_by: str = Query(DEFAULT_SORT),
    service: PropertyService = Depends(get_property_service),
):
    criteria = SearchCriteria(
        search_query=search,
        price_min=price_min,
        price_max=price_max,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        property_type=property_type,
        status=status,
        sort_by=sort_by,
    )
    items = service.search_properties(criteria)
    return PropertyListResponse(items=items, total=len(items))


@router.get("/properties/{property_id}", response_model=PropertyListing)
def get_prop(property_id: int, service: PropertyService = Depends(get_property_service)):
    listing = service.get_property(property_id)
    if listing is None:
        raise HTTPException(404, detail="Property not found")
    return listing


@router.get("/favorites", response_model=PropertyListResponse)
def list_favorites(sort_by: str = Query(DEFAULT_SORT), service: PropertyService = Depends(get_property_service)):
    items = service.list_favorites(sort_by=sort_by)
    return PropertyListResponse(items=items, total=len(items))


@router.get("/favorites/ids", response_model=FavoriteIdsResponse)
def favorite_ids(service: PropertyService = Depends(get_property_service)):
    return FavoriteIdsResponse(ids=sorted(service.ledger.list_favorite_ids()))


@router.post("/favorites/{property_id}/toggle", response_model=FavoriteToggleResponse)
def toggle_favorite(property_id: int, service: PropertyService = Depends(get_property_service)):
    if property_id <= 0:
        raise HTTPException(400, detail="invalid property id")
    return FavoriteToggleResponse(id=property_id, is_favorite=service.toggle_favorite(property_id))


@router.get("/compare", response_model=ComparisonResponse)
def compare(ids: str = Query(""), service: PropertyService = Depends(get_property_service)):
    requested = [part.strip() for part in ids.split(",") if part.strip()]
    try:
        items = service.compare(requested)
    except ComparisonError as exc:
        raise HTTPException(409, detail=str(exc))
    return ComparisonResponse(items=items, rows=comparison_rows(items))


app.include_router(router)
