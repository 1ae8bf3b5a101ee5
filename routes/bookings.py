# routes/bookings.py
from fastapi import APIRouter, Query, status
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
import logging

from db.connection import booking_service_dependency
from functions.responses import send_success, send_error, parse_pagination_params, get_pagination_meta
from models.Bookings import BookingStatus
from schemas.bookings import BookingCreate, BookingCancel, BookingPaymentUpdate, BookingResponse
from services.exceptions import BookingNotFound, BookingStateError, ListingNotFound

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])
logger = logging.getLogger(__name__)


def _lifecycle_error(e: Exception):
    if isinstance(e, BookingNotFound):
        return send_error("Booking not found", status.HTTP_404_NOT_FOUND)
    return send_error(str(e), status.HTTP_409_CONFLICT)


def _database_error(action: str, e: SQLAlchemyError):
    logger.error(f"Database error while trying to {action}: {e}", exc_info=True)
    return send_error(f"Failed to {action}", status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.post("")
async def create_booking(payload: BookingCreate, bookings: booking_service_dependency):
    """Reserve a homestay or a guide. New bookings start as pending."""
    try:
        booking = await bookings.create(payload)
    except ListingNotFound as e:
        return send_error(
            "Listing not found", status.HTTP_404_NOT_FOUND,
            [{"field": "listing.listing_id", "message": str(e)}],
        )
    except SQLAlchemyError as e:
        return _database_error("create booking", e)
    return send_success(BookingResponse.from_booking(booking), status.HTTP_201_CREATED)


@router.get("")
async def list_bookings(
    bookings: booking_service_dependency,
    email: Optional[str] = None,
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    page: Optional[str] = None,
    limit: Optional[str] = None,
):
    page_number, page_size = parse_pagination_params(page, limit)
    try:
        rows, total = await bookings.list(email=email, status=booking_status, page=page_number, limit=page_size)
    except SQLAlchemyError as e:
        return _database_error("list bookings", e)
    return send_success({
        "bookings": [BookingResponse.from_booking(b) for b in rows],
        "pagination": get_pagination_meta(page_number, page_size, total),
    })


@router.get("/{booking_number}")
async def get_booking(booking_number: str, bookings: booking_service_dependency):
    try:
        booking = await bookings.get(booking_number)
    except BookingNotFound as e:
        return _lifecycle_error(e)
    except SQLAlchemyError as e:
        return _database_error("get booking", e)
    return send_success(BookingResponse.from_booking(booking))


@router.patch("/{booking_number}/confirm")
async def confirm_booking(booking_number: str, bookings: booking_service_dependency):
    try:
        booking = await bookings.confirm(booking_number)
    except (BookingNotFound, BookingStateError) as e:
        return _lifecycle_error(e)
    except SQLAlchemyError as e:
        return _database_error("confirm booking", e)
    return send_success(BookingResponse.from_booking(booking))


@router.patch("/{booking_number}/cancel")
async def cancel_booking(
    booking_number: str,
    bookings: booking_service_dependency,
    payload: Optional[BookingCancel] = None,
):
    try:
        booking = await bookings.cancel(booking_number, payload.reason if payload else None)
    except (BookingNotFound, BookingStateError) as e:
        return _lifecycle_error(e)
    except SQLAlchemyError as e:
        return _database_error("cancel booking", e)
    return send_success(BookingResponse.from_booking(booking))


@router.patch("/{booking_number}/complete")
async def complete_booking(booking_number: str, bookings: booking_service_dependency):
    try:
        booking = await bookings.complete(booking_number)
    except (BookingNotFound, BookingStateError) as e:
        return _lifecycle_error(e)
    except SQLAlchemyError as e:
        return _database_error("complete booking", e)
    return send_success(BookingResponse.from_booking(booking))


@router.patch("/{booking_number}/payment")
async def update_payment_status(
    booking_number: str,
    payload: BookingPaymentUpdate,
    bookings: booking_service_dependency,
):
    try:
        booking = await bookings.update_payment(booking_number, payload.payment_status)
    except BookingNotFound as e:
        return _lifecycle_error(e)
    except SQLAlchemyError as e:
        return _database_error("update payment status", e)
    return send_success(BookingResponse.from_booking(booking))
