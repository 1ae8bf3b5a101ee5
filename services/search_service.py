# services/search_service.py
from typing import List, Optional
import asyncio
import logging

from functions.responses import get_pagination_meta
from schemas.search import (
    SearchQuery, SearchType, SearchEnvelope, SearchResults, SearchTotals,
    Suggestion, MIN_QUERY_LENGTH, MAX_SUGGESTIONS, SUGGESTIONS_PER_CATEGORY
)
from services.exceptions import ValidationError, SearchFailure, AutocompleteFailure

logger = logging.getLogger(__name__)


def validate_term(raw: Optional[str]) -> str:
    """Trim the search term and reject anything shorter than two characters."""
    term = (raw or "").strip()
    if len(term) < MIN_QUERY_LENGTH:
        raise ValidationError("q", f"Search query must be at least {MIN_QUERY_LENGTH} characters")
    return term


def build_search_query(raw_q: Optional[str], raw_type: Optional[str], page: int, limit: int) -> SearchQuery:
    term = validate_term(raw_q)
    try:
        search_type = SearchType(raw_type or SearchType.ALL.value)
    except ValueError:
        allowed = ", ".join(t.value for t in SearchType)
        raise ValidationError("type", f"Search type must be one of: {allowed}") from None
    return SearchQuery(term=term, type=search_type, page=page, page_size=limit)


async def _resolved(value):
    return value


async def _gather_all(*aws):
    """Like asyncio.gather, but waits for every operation before raising the first failure."""
    outcome = await asyncio.gather(*aws, return_exceptions=True)
    for result in outcome:
        if isinstance(result, BaseException):
            raise result
    return outcome


class UnifiedSearchService:
    """
    Searches homestays, guides and products at once.

    The three repositories are injected; each must expose awaitable
    find/count/suggest and the homestay one also top_districts.
    """

    def __init__(self, homestays, guides, products):
        self.homestays = homestays
        self.guides = guides
        self.products = products

    def _sources(self):
        return [
            (SearchType.HOMESTAYS, self.homestays),
            (SearchType.GUIDES, self.guides),
            (SearchType.PRODUCTS, self.products),
        ]

    async def search(self, query: SearchQuery) -> SearchEnvelope:
        term = validate_term(query.term)

        fetches = []
        counts = []
        for search_type, repository in self._sources():
            if query.includes(search_type):
                fetches.append(repository.find(term, query.skip, query.page_size))
                counts.append(repository.count(term))
            else:
                # filtered out: no query issued
                fetches.append(_resolved([]))
                counts.append(_resolved(0))

        logger.info(f"Searching '{term}' (type={query.type.value}, page={query.page}, limit={query.page_size})")
        try:
            outcome = await _gather_all(*fetches, *counts)
        except Exception as e:
            logger.error(f"Unified search failed for '{term}': {e}", exc_info=True)
            raise SearchFailure("Failed to perform search") from e

        homestays, guides, products = (list(items)[:query.page_size] for items in outcome[:3])
        homestays_count, guides_count, products_count = outcome[3:]
        overall = homestays_count + guides_count + products_count

        return SearchEnvelope(
            results=SearchResults(
                homestays=homestays,
                guides=guides,
                products=products,
                total=SearchTotals(
                    homestays=homestays_count,
                    guides=guides_count,
                    products=products_count,
                    overall=overall,
                ),
            ),
            query=term,
            pagination=get_pagination_meta(query.page, query.page_size, overall),
        )

    async def autocomplete(self, raw_term: Optional[str]) -> List[Suggestion]:
        term = validate_term(raw_term)
        per_category = SUGGESTIONS_PER_CATEGORY

        try:
            homestays, guides, products, locations = await _gather_all(
                self.homestays.suggest(term, per_category),
                self.guides.suggest(term, per_category),
                self.products.suggest(term, per_category),
                self.homestays.top_districts(term, per_category),
            )
        except Exception as e:
            logger.error(f"Autocomplete failed for '{term}': {e}", exc_info=True)
            raise AutocompleteFailure("Failed to get suggestions") from e

        # Priority order matters: truncation below drops from the tail
        suggestions = [
            Suggestion(text=district, type="location", count=count)
            for district, count in locations
        ]
        suggestions += [Suggestion(text=title, type="homestay", id=str(_id)) for _id, title in homestays]
        suggestions += [Suggestion(text=name, type="guide", id=str(_id)) for _id, name in guides]
        suggestions += [Suggestion(text=title, type="product", id=str(_id)) for _id, title in products]

        return suggestions[:MAX_SUGGESTIONS]
