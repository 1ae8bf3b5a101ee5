# models/Bookings.py
from sqlalchemy import (
    Column, Integer, String, Text, Float, DateTime, Enum, Index,
    CheckConstraint, event
)
from db.database import Base
from datetime import datetime
import enum
import math

SECONDS_PER_DAY = 60 * 60 * 24


class ListingType(enum.Enum):
    HOMESTAY = "homestay"
    GUIDE = "guide"


class BookingStatus(enum.Enum):
    PENDING = "pending"        # Awaiting confirmation
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"    # Stay/service completed


class PaymentStatus(enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    REFUNDED = "refunded"
    FAILED = "failed"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    booking_number = Column(String(32), unique=True, nullable=False, index=True)

    # Polymorphic reference: listing_id points at homestays.id or guides.id depending on listing_type
    listing_type = Column(Enum(ListingType, values_callable=_enum_values), nullable=False)
    listing_id = Column(Integer, nullable=False)
    listing_title = Column(String(255), nullable=True)

    check_in = Column(DateTime, nullable=False)
    check_out = Column(DateTime, nullable=False)
    nights = Column(Integer, nullable=True)

    # Guest count
    guests_adults = Column(Integer, nullable=False)
    guests_children = Column(Integer, nullable=True, default=0)
    guests_total = Column(Integer, nullable=True)

    # Guest contact details
    guest_name = Column(String(255), nullable=False)
    guest_email = Column(String(255), nullable=False)
    guest_phone = Column(String(50), nullable=False)

    special_requests = Column(Text, nullable=True)

    # Pricing breakdown
    base_price = Column(Float, nullable=False)
    cleaning_fee = Column(Float, nullable=True)
    service_fee = Column(Float, nullable=True)
    taxes = Column(Float, nullable=True)
    total_price = Column(Float, nullable=False)

    status = Column(
        Enum(BookingStatus, values_callable=_enum_values),
        nullable=False,
        default=BookingStatus.PENDING,
    )
    payment_status = Column(
        Enum(PaymentStatus, values_callable=_enum_values),
        nullable=False,
        default=PaymentStatus.PENDING,
    )

    cancellation_reason = Column(Text, nullable=True)
    cancelled_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_booking_listing_dates", "listing_id", "check_in", "check_out"),
        Index("idx_booking_status", "status"),
        Index("idx_booking_guest_email", "guest_email"),
        Index("idx_booking_created_at", "created_at"),
        CheckConstraint("guests_adults >= 1", name="ck_booking_adults"),
        CheckConstraint("base_price >= 0", name="ck_booking_base_price"),
        CheckConstraint("total_price >= 0", name="ck_booking_total_price"),
    )


def apply_derived_fields(booking):
    """
    Fill nights and guests_total when they have not been supplied.
    Values already present (non-zero) are left untouched.
    """
    if not booking.nights and booking.check_in and booking.check_out:
        diff = booking.check_out - booking.check_in
        booking.nights = math.ceil(diff.total_seconds() / SECONDS_PER_DAY)

    if booking.guests_adults is not None and not booking.guests_total:
        booking.guests_total = booking.guests_adults + (booking.guests_children or 0)

    return booking


@event.listens_for(Booking, "before_insert")
@event.listens_for(Booking, "before_update")
def _derive_before_write(mapper, connection, target):
    apply_derived_fields(target)
