from hashids import Hashids
import secrets
import time
import os

BOOKING_NUMBER_PREFIX = "BK"
BOOKING_NUMBER_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"

hashids = Hashids(
    salt=os.getenv("BOOKING_NUMBER_SALT", "homestay-bookings"),
    min_length=8,
    alphabet=BOOKING_NUMBER_ALPHABET,
)


def generate_booking_number() -> str:
    """e.g. BK-7XK2Q9MZ4P: millisecond timestamp plus a random nonce."""
    millis = int(time.time() * 1000)
    return f"{BOOKING_NUMBER_PREFIX}-{hashids.encode(millis, secrets.randbelow(10000))}"


def decode_booking_number(booking_number: str):
    """Return (millis, nonce) for a valid booking number, or None."""
    prefix, _, code = booking_number.partition("-")
    if prefix != BOOKING_NUMBER_PREFIX or not code:
        return None
    decoded = hashids.decode(code)
    return decoded if len(decoded) == 2 else None
