from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from .database import SessionLocal
from typing import Annotated

from models.Bookings import ListingType
from services.booking_service import BookingService
from services.repositories import HomestayRepository, GuideRepository, ProductRepository
from services.search_service import UnifiedSearchService


def get_session_factory() -> async_sessionmaker:
    return SessionLocal


session_factory_dependency = Annotated[async_sessionmaker, Depends(get_session_factory)]


async def get_db(session_factory: session_factory_dependency):
    async with session_factory() as db:
        yield db


db_dependency = Annotated[AsyncSession, Depends(get_db)]


def get_search_service(session_factory: session_factory_dependency) -> UnifiedSearchService:
    return UnifiedSearchService(
        homestays=HomestayRepository(session_factory),
        guides=GuideRepository(session_factory),
        products=ProductRepository(session_factory),
    )


search_service_dependency = Annotated[UnifiedSearchService, Depends(get_search_service)]


def get_booking_service(db: db_dependency, session_factory: session_factory_dependency) -> BookingService:
    return BookingService(db, listings={
        ListingType.HOMESTAY: HomestayRepository(session_factory),
        ListingType.GUIDE: GuideRepository(session_factory),
    })


booking_service_dependency = Annotated[BookingService, Depends(get_booking_service)]
