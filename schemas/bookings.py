# schemas/bookings.py
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from datetime import datetime, timezone
from typing import Annotated, Optional, Literal, Union
import re

from models.Bookings import BookingStatus, PaymentStatus


class HomestayReference(BaseModel):
    listing_type: Literal["homestay"]
    listing_id: int = Field(..., ge=1)


class GuideReference(BaseModel):
    listing_type: Literal["guide"]
    listing_id: int = Field(..., ge=1)


ListingReference = Annotated[
    Union[HomestayReference, GuideReference],
    Field(discriminator="listing_type"),
]


class GuestCount(BaseModel):
    adults: int = Field(..., ge=1)
    children: int = Field(0, ge=0)
    total: Optional[int] = Field(None, ge=1)


class GuestDetails(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    phone: str = Field(..., min_length=5, max_length=50)

    @field_validator("name", "phone")
    @classmethod
    def strip_text(cls, v):
        return v.strip()

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        v = v.strip().lower()
        if not re.match(r"^[^@\s]+@[^@\s]+$", v):
            raise ValueError("Invalid email address")
        return v


class BookingPricing(BaseModel):
    base_price: float = Field(..., ge=0)
    cleaning_fee: Optional[float] = Field(None, ge=0)
    service_fee: Optional[float] = Field(None, ge=0)
    taxes: Optional[float] = Field(None, ge=0)
    total: float = Field(..., ge=0)


class BookingCreate(BaseModel):
    listing: ListingReference
    check_in: datetime
    check_out: datetime
    nights: Optional[int] = Field(None, ge=1)
    guests: GuestCount
    guest_details: GuestDetails
    special_requests: Optional[str] = None
    pricing: BookingPricing

    @field_validator("check_in", "check_out")
    @classmethod
    def to_naive_utc(cls, v: datetime):
        # stored in timezone-less columns
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @model_validator(mode="after")
    def check_dates(self):
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "listing": {"listing_type": "homestay", "listing_id": 12},
                "check_in": "2024-01-01T14:00:00",
                "check_out": "2024-01-04T11:00:00",
                "guests": {"adults": 2, "children": 1},
                "guest_details": {
                    "name": "Asha Rai",
                    "email": "asha@example.com",
                    "phone": "+919800000000"
                },
                "pricing": {"base_price": 4500, "service_fee": 300, "total": 4800}
            }
        }
    )


class BookingCancel(BaseModel):
    reason: Optional[str] = Field(None, max_length=1000)


class BookingPaymentUpdate(BaseModel):
    payment_status: PaymentStatus


class BookingResponse(BaseModel):
    booking_number: str
    listing: ListingReference
    listing_title: Optional[str] = None
    check_in: datetime
    check_out: datetime
    nights: Optional[int] = None
    guests: GuestCount
    guest_details: GuestDetails
    special_requests: Optional[str] = None
    pricing: BookingPricing
    status: BookingStatus
    payment_status: PaymentStatus
    cancellation_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_booking(cls, booking):
        """Re-nest a flat Booking row into the public shape."""
        return cls(
            booking_number=booking.booking_number,
            listing={
                "listing_type": booking.listing_type.value,
                "listing_id": booking.listing_id,
            },
            listing_title=booking.listing_title,
            check_in=booking.check_in,
            check_out=booking.check_out,
            nights=booking.nights,
            guests=GuestCount(
                adults=booking.guests_adults,
                children=booking.guests_children or 0,
                total=booking.guests_total,
            ),
            guest_details=GuestDetails(
                name=booking.guest_name,
                email=booking.guest_email,
                phone=booking.guest_phone,
            ),
            special_requests=booking.special_requests,
            pricing=BookingPricing(
                base_price=booking.base_price,
                cleaning_fee=booking.cleaning_fee,
                service_fee=booking.service_fee,
                taxes=booking.taxes,
                total=booking.total_price,
            ),
            status=booking.status,
            payment_status=booking.payment_status,
            cancellation_reason=booking.cancellation_reason,
            cancelled_at=booking.cancelled_at,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )
