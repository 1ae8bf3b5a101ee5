# services/repositories.py
from sqlalchemy import select, func
from typing import List, Tuple

from models.Homestays import Homestay
from models.Guides import Guide
from models.Products import Product
from schemas.search import HomestayResult, GuideResult, ProductResult
from services import query_builder


class ListingRepository:
    """
    Read-only queries over one listing table.

    Each call opens its own session from `session_factory`, so several calls
    can be awaited concurrently without sharing a connection.
    """

    model = None
    result_schema = None
    projection: Tuple = ()
    label_field = "title"

    def __init__(self, session_factory):
        self.session_factory = session_factory

    def search_filter(self, term: str):
        raise NotImplementedError

    def suggest_filter(self, term: str):
        raise NotImplementedError

    async def find(self, term: str, skip: int = 0, limit: int = 10) -> list:
        stmt = (
            select(*self.projection)
            .where(self.search_filter(term))
            .order_by(self.model.id)
            .offset(skip)
            .limit(limit)
        )
        async with self.session_factory() as session:
            rows = (await session.execute(stmt)).mappings().all()
        return [self.result_schema.model_validate(self._project(dict(row))) for row in rows]

    async def count(self, term: str) -> int:
        stmt = select(func.count()).select_from(self.model).where(self.search_filter(term))
        async with self.session_factory() as session:
            return (await session.execute(stmt)).scalar_one()

    async def suggest(self, term: str, limit: int = 3) -> List[Tuple[int, str]]:
        label = getattr(self.model, self.label_field)
        stmt = (
            select(self.model.id, label)
            .where(self.suggest_filter(term))
            .order_by(self.model.id)
            .limit(limit)
        )
        async with self.session_factory() as session:
            rows = (await session.execute(stmt)).all()
        return [(row[0], row[1]) for row in rows]

    async def get(self, listing_id: int):
        async with self.session_factory() as session:
            return await session.get(self.model, listing_id)

    def _project(self, row: dict) -> dict:
        # only one representative image goes into search results
        if "images" in row:
            row["images"] = (row["images"] or [])[:1]
        return row


class HomestayRepository(ListingRepository):
    model = Homestay
    result_schema = HomestayResult
    projection = (
        Homestay.id,
        Homestay.title,
        Homestay.description,
        Homestay.district,
        Homestay.state,
        Homestay.base_price,
        Homestay.images,
    )

    def search_filter(self, term):
        return query_builder.homestay_filter(term)

    def suggest_filter(self, term):
        return query_builder.homestay_title_filter(term)

    async def top_districts(self, term: str, limit: int = 3) -> List[Tuple[str, int]]:
        """Distinct matching districts with the number of homestays in each."""
        listings = func.count(Homestay.id).label("count")
        stmt = (
            select(Homestay.district, listings)
            .where(query_builder.district_filter(term))
            .group_by(Homestay.district)
            .order_by(listings.desc(), Homestay.district)
            .limit(limit)
        )
        async with self.session_factory() as session:
            rows = (await session.execute(stmt)).all()
        return [(row[0], row[1]) for row in rows]


class GuideRepository(ListingRepository):
    model = Guide
    result_schema = GuideResult
    label_field = "name"
    projection = (
        Guide.id,
        Guide.name,
        Guide.bio,
        Guide.specializations,
        Guide.full_day_price,
    )

    def search_filter(self, term):
        return query_builder.guide_filter(term)

    def suggest_filter(self, term):
        return query_builder.guide_name_filter(term)

    def _project(self, row: dict) -> dict:
        row["specializations"] = row.get("specializations") or []
        return row


class ProductRepository(ListingRepository):
    model = Product
    result_schema = ProductResult
    projection = (
        Product.id,
        Product.title,
        Product.description,
        Product.category,
        Product.price_amount,
        Product.images,
    )

    def search_filter(self, term):
        return query_builder.product_filter(term)

    def suggest_filter(self, term):
        return query_builder.product_title_filter(term)
