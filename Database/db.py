'''
This file contains the database client for the Hotel Booking API.
'''
from typing import Optional  # noqa: E402
from supabase import create_client, Client  # noqa: E402

from config import Settings  # noqa: E402

USERS_TABLE_NAME = "users"
HOTELS_TABLE_NAME = "hotels"
ROOMS_TABLE_NAME = "rooms"
BOOKINGS_TABLE_NAME = "bookings"
PAYMENTS_TABLE_NAME = "payments"
TICKETS_TABLE_NAME = "customer_support_tickets"


class HotelDB:
    """Database Client"""

    # private interface
    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or Settings.from_env()
        url: Optional[str] = settings.supabase_url
        key: Optional[str] = settings.supabase_key
        if url is None or key is None:
            raise ValueError("Database URL or Key not found in environment variables.")
        self.client: Client = create_client(url, key)


def is_unique_violation(error: Exception) -> bool:
    """
    Determine whether a persistence error represents a uniqueness constraint violation.

    Args:
        error: Exception raised by the persistence layer.

    Returns:
        True if the error indicates a duplicate/unique constraint conflict.
    """

    if getattr(error, "code", None) == "23505":
        return True

    if str(getattr(error, "status_code", None)) == "409":
        return True

    message = str(error).lower()
    return "duplicate key value" in message or "unique constraint" in message


if __name__ == "__main__":
    db_conn = HotelDB()

    _ = db_conn.client.table(USERS_TABLE_NAME).select("user_id").execute()
    print(_)
