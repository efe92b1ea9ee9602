"""Hotel-related FastAPI routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from Database.db import HOTELS_TABLE_NAME, ROOMS_TABLE_NAME
from Database.deps import get_db
from Hotels.structure import Hotel, HotelPayload, Room
from utils import utcnow_iso

from .models import (
    HotelFields,
    HotelListResponse,
    HotelResponse,
    MessageResponse,
    RoomListResponse,
)
from .utils import (
    _delete_record,
    _fetch_record,
    _fetch_records,
    _insert_record,
    _parse_id as _parse_hotel_id,
    _require_updates,
    _update_record,
    _validate_merged,
)

logger = logging.getLogger(__name__)

HOTEL = "hotel"
ID_COLUMN = "Hotel_id"

# mount api router
hotel_router = APIRouter()


async def _fetch_hotel_record(db, hotel_id: int, failure_detail: str) -> dict:
    return await _fetch_record(
        db,
        HOTELS_TABLE_NAME,
        ID_COLUMN,
        hotel_id,
        not_found_detail=f"No hotel found with id {hotel_id}",
        failure_detail=failure_detail,
        log_context={"hotel_id": hotel_id},
    )


@hotel_router.get("/health", response_model=MessageResponse)
async def health_check() -> MessageResponse:
    return MessageResponse(status=status.HTTP_200_OK, message="Hotel service is healthy")


@hotel_router.get("", response_model=HotelListResponse)
async def list_hotels(db=Depends(get_db)) -> HotelListResponse:
    records = await _fetch_records(
        db,
        HOTELS_TABLE_NAME,
        failure_detail="Unable to retrieve hotels due to an internal error.",
        log_context={},
    )
    return HotelListResponse(status=status.HTTP_200_OK, hotels=[Hotel(**record) for record in records])


@hotel_router.post(
    "",
    response_model=HotelResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_hotel(hotel: HotelPayload, db=Depends(get_db)) -> HotelResponse:
    """Register a hotel. Rating must lie within 0..5."""

    created = await _insert_record(
        db,
        HOTELS_TABLE_NAME,
        hotel.to_dict(),
        conflict_detail=f"Hotel {hotel.Name} already exists",
        failure_detail="Unable to create hotel due to an internal error.",
        log_context={"hotel_name": hotel.Name},
    )
    created_hotel = Hotel(**created)
    logger.info("Hotel created", extra={"hotel_id": created_hotel.Hotel_id})
    return HotelResponse(status=status.HTTP_201_CREATED, hotel=created_hotel)


@hotel_router.get(
    "/{hotel_id}",
    response_model=HotelResponse,
    status_code=status.HTTP_200_OK,
)
async def get_hotel(hotel_id: str, db=Depends(get_db)) -> HotelResponse:
    record_id = _parse_hotel_id(hotel_id, logger, HOTEL)
    record = await _fetch_hotel_record(db, record_id, "Unable to retrieve hotel due to an internal error.")

    logger.info("Hotel retrieved", extra={"hotel_id": hotel_id})
    return HotelResponse(status=status.HTTP_200_OK, hotel=Hotel(**record))


@hotel_router.patch(
    "/{hotel_id}",
    response_model=HotelResponse,
    status_code=status.HTTP_200_OK,
)
async def update_hotel(hotel_id: str, fields: HotelFields, db=Depends(get_db)) -> HotelResponse:
    """
    Patch a hotel and return it as stored.

    Args:
        hotel_id: Path identifier, a positive integer.
        fields: Columns to change; unset and null fields are left alone.
        db: Supabase client.

    Raises:
        HTTPException: 400 for an empty patch, 404 for an unknown hotel,
            422 when the patched hotel would be invalid.
    """

    record_id = _parse_hotel_id(hotel_id, logger, HOTEL)
    updates = _require_updates(fields)
    failure_detail = "Unable to update hotel due to an internal error."

    existing = await _fetch_hotel_record(db, record_id, failure_detail)
    _validate_merged(Hotel, existing, updates)

    updates["Updated_at"] = utcnow_iso()
    await _update_record(
        db,
        HOTELS_TABLE_NAME,
        ID_COLUMN,
        record_id,
        updates,
        conflict_detail="Unable to update hotel due to a unique constraint violation.",
        failure_detail=failure_detail,
        log_context={"hotel_id": hotel_id, "updates": updates},
    )

    refreshed = await _fetch_hotel_record(db, record_id, failure_detail)
    logger.info("Hotel updated", extra={"hotel_id": hotel_id})
    return HotelResponse(status=status.HTTP_200_OK, hotel=Hotel(**refreshed))


@hotel_router.delete(
    "/{hotel_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
)
async def delete_hotel(hotel_id: str, db=Depends(get_db)) -> MessageResponse:
    """Delete an existing hotel by identifier."""

    record_id = _parse_hotel_id(hotel_id, logger, HOTEL)
    failure_detail = "Unable to delete hotel due to an internal error."

    _ = await _fetch_hotel_record(db, record_id, failure_detail)
    await _delete_record(
        db,
        HOTELS_TABLE_NAME,
        ID_COLUMN,
        record_id,
        failure_detail=failure_detail,
        log_context={"hotel_id": hotel_id},
    )

    logger.info("Hotel deleted", extra={"hotel_id": hotel_id})
    return MessageResponse(status=status.HTTP_200_OK, message=f"Hotel {record_id} deleted")


@hotel_router.get(
    "/{hotel_id}/rooms",
    response_model=RoomListResponse,
    status_code=status.HTTP_200_OK,
)
async def list_hotel_rooms(hotel_id: str, db=Depends(get_db)) -> RoomListResponse:
    """List the rooms of one hotel; 404 when the hotel is unknown or has no rooms."""

    record_id = _parse_hotel_id(hotel_id, logger, HOTEL)
    failure_detail = "Unable to retrieve rooms due to an internal error."

    _ = await _fetch_hotel_record(db, record_id, failure_detail)
    records = await _fetch_records(
        db,
        ROOMS_TABLE_NAME,
        failure_detail=failure_detail,
        log_context={"hotel_id": hotel_id},
        filters={ID_COLUMN: record_id},
    )
    if not records:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No rooms found for hotel with id {hotel_id}",
        )

    room_records = [Room(**record) for record in records]
    logger.info("Hotel rooms retrieved", extra={"hotel_id": hotel_id, "count": len(room_records)})
    return RoomListResponse(status=status.HTTP_200_OK, rooms=room_records)
