# schemas/search.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any, Literal
from enum import Enum


MIN_QUERY_LENGTH = 2
MAX_SUGGESTIONS = 10
SUGGESTIONS_PER_CATEGORY = 3


class SearchType(str, Enum):
    ALL = "all"
    HOMESTAYS = "homestays"
    GUIDES = "guides"
    PRODUCTS = "products"


class SearchQuery(BaseModel):
    term: str
    type: SearchType = SearchType.ALL
    page: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1, le=100)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size

    def includes(self, search_type: SearchType) -> bool:
        return self.type in (SearchType.ALL, search_type)


# ------------------ RESULT ITEMS ------------------

class HomestayResult(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: Literal["homestay"] = "homestay"
    id: int
    title: str
    description: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    base_price: Optional[float] = None
    images: List[Dict[str, Any]] = Field(default_factory=list, max_length=1)


class GuideResult(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: Literal["guide"] = "guide"
    id: int
    name: str
    bio: Optional[str] = None
    specializations: List[str] = []
    full_day_price: Optional[float] = None


class ProductResult(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: Literal["product"] = "product"
    id: int
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    price_amount: Optional[float] = None
    images: List[Dict[str, Any]] = Field(default_factory=list, max_length=1)


# ------------------ ENVELOPES ------------------

class SearchTotals(BaseModel):
    homestays: int = 0
    guides: int = 0
    products: int = 0
    overall: int = 0


class SearchResults(BaseModel):
    homestays: List[HomestayResult] = []
    guides: List[GuideResult] = []
    products: List[ProductResult] = []
    total: SearchTotals


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class SearchEnvelope(BaseModel):
    results: SearchResults
    query: str
    pagination: PaginationMeta


class Suggestion(BaseModel):
    text: str
    type: Literal["location", "homestay", "guide", "product"]
    id: Optional[str] = None
    count: Optional[int] = None  # only for locations


class AutocompleteResponse(BaseModel):
    suggestions: List[Suggestion] = Field(default_factory=list, max_length=MAX_SUGGESTIONS)
