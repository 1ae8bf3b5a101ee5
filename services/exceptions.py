# services/exceptions.py


class ValidationError(Exception):
    """User-correctable input problem tied to a single request field."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message

    def as_field_errors(self):
        return [{"field": self.field, "message": self.message}]


class SearchFailure(Exception):
    pass


class AutocompleteFailure(Exception):
    pass


class ListingNotFound(Exception):
    def __init__(self, listing_type: str, listing_id: int):
        super().__init__(f"{listing_type} {listing_id} not found")
        self.listing_type = listing_type
        self.listing_id = listing_id


class BookingNotFound(Exception):
    def __init__(self, booking_number: str):
        super().__init__(f"Booking {booking_number} not found")
        self.booking_number = booking_number


class BookingStateError(Exception):
    """Raised when a lifecycle transition is not allowed from the current status."""
