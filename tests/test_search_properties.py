"""
Property-based tests for the unified search aggregator.

These tests verify properties that should hold for every combination of
type filter and pagination input.
"""

import asyncio

import pytest
from hypothesis import given, settings, strategies as st

from schemas.search import SearchQuery, SearchType
from services.exceptions import ValidationError, SearchFailure
from services.search_service import UnifiedSearchService, build_search_query
from tests.fakes import build_repositories, make_homestays, make_guides, make_products


search_types = st.sampled_from(list(SearchType))
pages = st.integers(min_value=1, max_value=5)
page_sizes = st.integers(min_value=1, max_value=100)
short_terms = st.text(max_size=1).map(lambda s: f" {s} ")


def _service(n_homestays=12, n_guides=7, n_products=4):
    repos = build_repositories(
        make_homestays(n_homestays), make_guides(n_guides), make_products(n_products)
    )
    return UnifiedSearchService(*repos), repos


@given(term=short_terms, search_type=search_types, page=pages, page_size=page_sizes)
@settings(max_examples=50)
def test_short_terms_are_rejected(term, search_type, page, page_size):
    """
    For any term shorter than two characters (after trimming), search fails
    with a validation error naming field q and no query is issued.
    """
    service, repos = _service()
    query = SearchQuery(term=term, type=search_type, page=page, page_size=page_size)

    with pytest.raises(ValidationError) as exc:
        asyncio.run(service.search(query))

    assert exc.value.field == "q"
    assert all(repo.calls == [] for repo in repos)


@given(search_type=search_types, page=pages, page_size=page_sizes)
@settings(max_examples=100)
def test_overall_is_sum_of_counts(search_type, page, page_size):
    """For any filter, overall equals homestays + guides + products."""
    service, _ = _service()
    envelope = asyncio.run(service.search(
        SearchQuery(term="river", type=search_type, page=page, page_size=page_size)
    ))
    total = envelope.results.total

    assert total.overall == total.homestays + total.guides + total.products
    assert envelope.pagination.total == total.overall


@pytest.mark.parametrize("search_type,selected,expected_count", [
    (SearchType.HOMESTAYS, "homestays", 12),
    (SearchType.GUIDES, "guides", 7),
    (SearchType.PRODUCTS, "products", 4),
])
def test_single_type_filter_empties_the_others(search_type, selected, expected_count):
    service, repos = _service()
    envelope = asyncio.run(service.search(SearchQuery(term="river", type=search_type)))
    results = envelope.results

    for name in ("homestays", "guides", "products"):
        if name == selected:
            assert getattr(results.total, name) == expected_count
        else:
            assert getattr(results, name) == []
            assert getattr(results.total, name) == 0

    assert results.total.overall == expected_count
    # filtered-out types are never queried
    queried = [repo for repo in repos if repo.queried()]
    assert len(queried) == 1


def test_each_type_is_paginated_independently():
    service, repos = _service()
    envelope = asyncio.run(service.search(SearchQuery(term="river", page=2, page_size=5)))

    for repo in repos:
        assert ("find", "river", 5, 5) in repo.calls
        assert ("count", "river") in repo.calls

    # page 2 of 5: homestays 6-10, guides 6-7, products none
    assert [h.id for h in envelope.results.homestays] == [6, 7, 8, 9, 10]
    assert [g.id for g in envelope.results.guides] == [6, 7]
    assert envelope.results.products == []
    assert envelope.pagination.total == 23
    assert envelope.pagination.total_pages == 5
    assert envelope.pagination.has_prev is True


@given(page_size=st.integers(min_value=1, max_value=20))
@settings(max_examples=30)
def test_items_per_type_never_exceed_page_size(page_size):
    service, repos = _service(n_homestays=30, n_guides=30, n_products=30)

    # a repository ignoring the limit must not leak extra rows
    homestays = repos[0]
    original_find = homestays.find

    async def greedy_find(term, skip, limit):
        return await original_find(term, 0, 1000)

    homestays.find = greedy_find
    envelope = asyncio.run(service.search(SearchQuery(term="river", page_size=page_size)))

    assert len(envelope.results.homestays) <= page_size
    assert len(envelope.results.guides) <= page_size
    assert len(envelope.results.products) <= page_size


def test_result_items_carry_their_type_tag():
    service, _ = _service()
    envelope = asyncio.run(service.search(SearchQuery(term="river")))

    assert {h.type for h in envelope.results.homestays} == {"homestay"}
    assert {g.type for g in envelope.results.guides} == {"guide"}
    assert {p.type for p in envelope.results.products} == {"product"}


def test_term_is_trimmed_before_querying():
    service, repos = _service()
    envelope = asyncio.run(service.search(SearchQuery(term="  river  ")))

    assert envelope.query == "river"
    assert ("count", "river") in repos[0].calls


@pytest.mark.parametrize("failing", [0, 1, 2])
def test_any_failure_aborts_the_whole_search(failing):
    service, repos = _service()
    repos[failing].error = RuntimeError("connection reset")

    with pytest.raises(SearchFailure):
        asyncio.run(service.search(SearchQuery(term="river")))


def test_failure_in_filtered_out_type_is_not_reached():
    service, repos = _service()
    repos[2].error = RuntimeError("connection reset")

    envelope = asyncio.run(service.search(SearchQuery(term="river", type=SearchType.GUIDES)))
    assert envelope.results.total.overall == 7


@pytest.mark.asyncio
async def test_queries_run_concurrently():
    """All fetch and count operations are in flight before any of them finishes."""
    in_flight = 0
    peak = 0

    class SlowRepository:
        label_field = "title"

        async def _op(self, value):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return value

        async def find(self, term, skip, limit):
            return await self._op([])

        async def count(self, term):
            return await self._op(1)

    service = UnifiedSearchService(SlowRepository(), SlowRepository(), SlowRepository())
    envelope = await service.search(SearchQuery(term="river"))

    assert peak == 6
    assert envelope.results.total.overall == 3


def test_unknown_type_is_rejected_after_term():
    with pytest.raises(ValidationError) as exc:
        build_search_query("river", "villas", 1, 10)
    assert exc.value.field == "type"

    with pytest.raises(ValidationError) as exc:
        build_search_query("r", "villas", 1, 10)
    assert exc.value.field == "q"


@pytest.mark.asyncio
async def test_failure_waits_for_sibling_queries():
    """A failing query does not leave the other queries running in the background."""
    finished = []

    class Repository:
        label_field = "title"

        def __init__(self, name, fail=False):
            self.name = name
            self.fail = fail

        async def find(self, term, skip, limit):
            if self.fail:
                raise RuntimeError("connection reset")
            await asyncio.sleep(0.02)
            finished.append(("find", self.name))
            return []

        async def count(self, term):
            await asyncio.sleep(0.02)
            finished.append(("count", self.name))
            return 0

    service = UnifiedSearchService(
        Repository("homestays", fail=True), Repository("guides"), Repository("products")
    )

    with pytest.raises(SearchFailure) as exc:
        await service.search(SearchQuery(term="river"))

    assert isinstance(exc.value.__cause__, RuntimeError)
    assert len(finished) == 5
