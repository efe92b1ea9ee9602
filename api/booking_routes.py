"""Booking-related FastAPI routes."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from Database.db import BOOKINGS_TABLE_NAME, ROOMS_TABLE_NAME, USERS_TABLE_NAME
from Database.deps import get_db
from Hotels.booking import Booking, BookingPayload
from utils import are_overlapping, utcnow_iso

from .models import BookingFields, BookingListResponse, BookingResponse, MessageResponse
from .utils import (
    _delete_record,
    _fetch_record,
    _fetch_records,
    _insert_record,
    _parse_id as _parse_booking_id,
    _require_updates,
    _update_record,
    _validate_merged,
)

logger = logging.getLogger(__name__)

BOOKING = "booking"
ID_COLUMN = "Booking_id"
CANCELLED = "Cancelled"

# mount api router
booking_router = APIRouter()


async def _fetch_booking_record(db: Any, booking_id: int, failure_detail: str) -> dict[str, Any]:
    return await _fetch_record(
        db,
        BOOKINGS_TABLE_NAME,
        ID_COLUMN,
        booking_id,
        not_found_detail=f"No booking found with id {booking_id}",
        failure_detail=failure_detail,
        log_context={"booking_id": booking_id},
    )


async def _ensure_room_is_free(
    db: Any,
    booking: Booking | BookingPayload,
    failure_detail: str,
    exclude_id: Optional[int] = None,
) -> None:
    """
    Reject a stay that overlaps another active booking of the same room.

    Args:
        db: Database client.
        booking: Stay to check. Cancelled stays never conflict.
        failure_detail: Message returned when the database query fails.
        exclude_id: Booking to ignore, used when updating an existing one.

    Raises:
        HTTPException: 409 when the room is already taken for those dates.
    """

    if booking.Booking_status == CANCELLED:
        return

    existing = await _fetch_records(
        db,
        BOOKINGS_TABLE_NAME,
        failure_detail=failure_detail,
        log_context={"room_id": booking.Room_id},
        filters={"Room_id": booking.Room_id},
    )
    for row in existing:
        if row.get("Booking_status") == CANCELLED or row.get(ID_COLUMN) == exclude_id:
            continue
        if are_overlapping(
            booking.Check_in_date, booking.Check_out_date, row["Check_in_date"], row["Check_out_date"]
        ):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Room {booking.Room_id} is already booked for the requested dates",
            )


@booking_router.get("", response_model=BookingListResponse)
async def list_bookings(db=Depends(get_db)) -> BookingListResponse:
    records = await _fetch_records(
        db,
        BOOKINGS_TABLE_NAME,
        failure_detail="Unable to retrieve bookings due to an internal error.",
        log_context={},
    )
    return BookingListResponse(
        status=status.HTTP_200_OK, bookings=[Booking(**record) for record in records]
    )


@booking_router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(booking: BookingPayload, db=Depends(get_db)) -> BookingResponse:
    """
    Book a room for a guest.

    Args:
        booking: Booking payload to persist.
        db: Supabase client injected via dependency.

    Returns:
        BookingResponse wrapping the created booking.
    """

    failure_detail = "Unable to create booking due to an internal error."
    _ = await _fetch_record(
        db,
        USERS_TABLE_NAME,
        "user_id",
        booking.user_id,
        not_found_detail="User not found",
        failure_detail=failure_detail,
        log_context={"user_id": booking.user_id},
    )
    room = await _fetch_record(
        db,
        ROOMS_TABLE_NAME,
        "Room_id",
        booking.Room_id,
        not_found_detail=f"No room found with id {booking.Room_id}",
        failure_detail=failure_detail,
        log_context={"room_id": booking.Room_id},
    )
    if not room.get("is_available", True):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Room {booking.Room_id} is not available",
        )

    await _ensure_room_is_free(db, booking, failure_detail)

    created = await _insert_record(
        db,
        BOOKINGS_TABLE_NAME,
        booking.to_dict(),
        conflict_detail=f"Room {booking.Room_id} is already booked for the requested dates",
        failure_detail=failure_detail,
        log_context={"room_id": booking.Room_id, "user_id": booking.user_id},
    )
    created_booking = Booking(**created)
    logger.info(
        "Booking created",
        extra={"booking_id": created_booking.Booking_id, "nights": created_booking.nights},
    )
    return BookingResponse(status=status.HTTP_201_CREATED, booking=created_booking)


@booking_router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(booking_id: str, db=Depends(get_db)) -> BookingResponse:
    record_id = _parse_booking_id(booking_id, logger, BOOKING)
    record = await _fetch_booking_record(
        db, record_id, "Unable to retrieve booking due to an internal error."
    )
    return BookingResponse(status=status.HTTP_200_OK, booking=Booking(**record))


@booking_router.patch("/{booking_id}", response_model=BookingResponse)
async def update_booking(booking_id: str, fields: BookingFields, db=Depends(get_db)) -> BookingResponse:
    """Change dates, amount or status of a booking, keeping the room free of overlaps."""

    record_id = _parse_booking_id(booking_id, logger, BOOKING)
    updates = _require_updates(fields)
    failure_detail = "Unable to update booking due to an internal error."

    existing = await _fetch_booking_record(db, record_id, failure_detail)
    merged = _validate_merged(Booking, existing, updates)
    if {"Check_in_date", "Check_out_date", "Booking_status"} & updates.keys():
        await _ensure_room_is_free(db, merged, failure_detail, exclude_id=record_id)

    updates["Updated_at"] = utcnow_iso()
    await _update_record(
        db,
        BOOKINGS_TABLE_NAME,
        ID_COLUMN,
        record_id,
        updates,
        conflict_detail="Unable to update booking due to a unique constraint violation.",
        failure_detail=failure_detail,
        log_context={"booking_id": booking_id},
    )

    refreshed = await _fetch_booking_record(db, record_id, failure_detail)
    logger.info("Booking updated", extra={"booking_id": booking_id})
    return BookingResponse(status=status.HTTP_200_OK, booking=Booking(**refreshed))


@booking_router.delete("/{booking_id}", response_model=MessageResponse)
async def delete_booking(booking_id: str, db=Depends(get_db)) -> MessageResponse:
    record_id = _parse_booking_id(booking_id, logger, BOOKING)
    failure_detail = "Unable to delete booking due to an internal error."

    _ = await _fetch_booking_record(db, record_id, failure_detail)
    await _delete_record(
        db,
        BOOKINGS_TABLE_NAME,
        ID_COLUMN,
        record_id,
        failure_detail=failure_detail,
        log_context={"booking_id": booking_id},
    )

    logger.info("Booking deleted", extra={"booking_id": booking_id})
    return MessageResponse(status=status.HTTP_200_OK, message=f"Booking {record_id} deleted")
