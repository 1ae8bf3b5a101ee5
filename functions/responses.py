from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from typing import Any, List, Optional
import math

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def send_success(data: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": jsonable_encoder(data)},
    )


def send_error(message: str, status_code: int = 500, errors: Optional[List[dict]] = None) -> JSONResponse:
    """
    Standard error envelope. `errors` carries field-level details,
    e.g. [{"field": "q", "message": "..."}].
    """
    content = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


def get_pagination_meta(page: int, limit: int, total: int) -> dict:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }


def _positive_int(raw, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def parse_pagination_params(page=None, limit=None) -> tuple:
    """Normalize raw page/limit input: defaults (1, 10), limit capped at 100."""
    return (
        _positive_int(page, DEFAULT_PAGE),
        min(_positive_int(limit, DEFAULT_LIMIT), MAX_LIMIT),
    )
