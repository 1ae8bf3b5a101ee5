# services/booking_service.py
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
from typing import Optional
import logging

from functions.bookingNumber import generate_booking_number, decode_booking_number
from models.Bookings import Booking, BookingStatus, ListingType, PaymentStatus
from schemas.bookings import BookingCreate
from services.exceptions import BookingNotFound, BookingStateError, ListingNotFound

logger = logging.getLogger(__name__)

# action -> (statuses it may start from, resulting status)
TRANSITIONS = {
    "confirm": ({BookingStatus.PENDING}, BookingStatus.CONFIRMED),
    "cancel": ({BookingStatus.PENDING, BookingStatus.CONFIRMED}, BookingStatus.CANCELLED),
    "complete": ({BookingStatus.CONFIRMED}, BookingStatus.COMPLETED),
}


class BookingService:
    """
    Booking persistence and lifecycle.

    `listings` maps each ListingType to the repository able to load that kind
    of listing, which is how the polymorphic listing reference is resolved.
    """

    def __init__(self, db: AsyncSession, listings: dict):
        self.db = db
        self.listings = listings

    async def resolve_listing(self, listing_type: ListingType, listing_id: int):
        repository = self.listings[listing_type]
        listing = await repository.get(listing_id)
        if listing is None:
            raise ListingNotFound(listing_type.value, listing_id)
        return getattr(listing, repository.label_field)

    async def create(self, payload: BookingCreate) -> Booking:
        listing_type = ListingType(payload.listing.listing_type)
        listing_title = await self.resolve_listing(listing_type, payload.listing.listing_id)

        booking = Booking(
            booking_number=generate_booking_number(),
            listing_type=listing_type,
            listing_id=payload.listing.listing_id,
            listing_title=listing_title,
            check_in=payload.check_in,
            check_out=payload.check_out,
            nights=payload.nights,
            guests_adults=payload.guests.adults,
            guests_children=payload.guests.children,
            guests_total=payload.guests.total,
            guest_name=payload.guest_details.name,
            guest_email=payload.guest_details.email,
            guest_phone=payload.guest_details.phone,
            special_requests=payload.special_requests,
            base_price=payload.pricing.base_price,
            cleaning_fee=payload.pricing.cleaning_fee,
            service_fee=payload.pricing.service_fee,
            taxes=payload.pricing.taxes,
            total_price=payload.pricing.total,
            status=BookingStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
        )
        self.db.add(booking)
        await self.db.commit()
        await self.db.refresh(booking)

        logger.info(f"Booking {booking.booking_number} created for {listing_type.value} {booking.listing_id}")
        return booking

    async def get(self, booking_number: str) -> Booking:
        if decode_booking_number(booking_number) is None:
            raise BookingNotFound(booking_number)

        result = await self.db.execute(
            select(Booking).where(Booking.booking_number == booking_number)
        )
        booking = result.scalars().first()
        if not booking:
            raise BookingNotFound(booking_number)
        return booking

    async def list(self, email: Optional[str] = None, status: Optional[BookingStatus] = None,
                   page: int = 1, limit: int = 10):
        """Newest first. Returns (bookings, total)."""
        conditions = []
        if email:
            conditions.append(Booking.guest_email == email.strip().lower())
        if status:
            conditions.append(Booking.status == status)

        total = (await self.db.execute(
            select(func.count()).select_from(Booking).where(*conditions)
        )).scalar_one()

        result = await self.db.execute(
            select(Booking)
            .where(*conditions)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return result.scalars().all(), total

    async def _transition(self, booking_number: str, action: str) -> Booking:
        booking = await self.get(booking_number)
        allowed_from, target = TRANSITIONS[action]
        if booking.status not in allowed_from:
            raise BookingStateError(
                f"Cannot {action} a booking that is {booking.status.value}"
            )
        booking.status = target
        return booking

    async def _save(self, booking: Booking) -> Booking:
        await self.db.commit()
        await self.db.refresh(booking)
        return booking

    async def confirm(self, booking_number: str) -> Booking:
        booking = await self._transition(booking_number, "confirm")
        logger.info(f"Booking {booking_number} confirmed")
        return await self._save(booking)

    async def cancel(self, booking_number: str, reason: Optional[str] = None) -> Booking:
        booking = await self._transition(booking_number, "cancel")
        booking.cancellation_reason = reason
        booking.cancelled_at = datetime.utcnow()
        logger.info(f"Booking {booking_number} cancelled")
        return await self._save(booking)

    async def complete(self, booking_number: str) -> Booking:
        booking = await self._transition(booking_number, "complete")
        logger.info(f"Booking {booking_number} completed")
        return await self._save(booking)

    async def update_payment(self, booking_number: str, payment_status: PaymentStatus) -> Booking:
        booking = await self.get(booking_number)
        booking.payment_status = payment_status
        logger.info(f"Booking {booking_number} payment status set to {payment_status.value}")
        return await self._save(booking)
