# routes/search.py
from fastapi import APIRouter, Query
from typing import Optional

from db.connection import search_service_dependency
from functions.responses import send_success, send_error, parse_pagination_params
from services.exceptions import ValidationError, SearchFailure, AutocompleteFailure
from schemas.search import AutocompleteResponse
from services.search_service import build_search_query

router = APIRouter(prefix="/api/search", tags=["search"])


@router.get("")
async def unified_search(
    search_service: search_service_dependency,
    q: str = Query("", description="Search query (minimum 2 characters)"),
    search_type: str = Query("all", alias="type", description="all, homestays, guides or products"),
    page: Optional[str] = Query(None, description="Page number (default: 1)"),
    limit: Optional[str] = Query(None, description="Items per page (default: 10, max: 100)"),
):
    """
    Unified search across homestays, guides and products.
    Pagination applies to each listing type separately.
    """
    page_number, page_size = parse_pagination_params(page, limit)
    try:
        query = build_search_query(q, search_type, page_number, page_size)
        envelope = await search_service.search(query)
    except ValidationError as e:
        return send_error("Validation failed", 400, e.as_field_errors())
    except SearchFailure:
        return send_error("Failed to perform search", 500)

    return send_success(envelope)


@router.get("/autocomplete")
async def autocomplete(
    search_service: search_service_dependency,
    q: str = Query("", description="Search query (minimum 2 characters)"),
):
    """Up to 10 suggestions: locations, then homestays, guides and products."""
    try:
        suggestions = await search_service.autocomplete(q)
    except ValidationError as e:
        return send_error("Validation failed", 400, e.as_field_errors())
    except AutocompleteFailure:
        return send_error("Failed to get suggestions", 500)

    return send_success(AutocompleteResponse(suggestions=suggestions))
