"""Room-related FastAPI routes."""

import logging

from fastapi import APIRouter, Depends, status

from Database.db import HOTELS_TABLE_NAME, ROOMS_TABLE_NAME
from Database.deps import get_db
from Hotels.structure import Room, RoomPayload
from utils import utcnow_iso

from .models import MessageResponse, RoomFields, RoomListResponse, RoomResponse
from .utils import (
    _delete_record,
    _fetch_record,
    _fetch_records,
    _insert_record,
    _parse_id as _parse_room_id,
    _require_updates,
    _update_record,
    _validate_merged,
)

logger = logging.getLogger(__name__)

ROOM = "room"
ID_COLUMN = "Room_id"

# mount api router
room_router = APIRouter()


async def _fetch_room_record(db, room_id: int, failure_detail: str) -> dict:
    return await _fetch_record(
        db,
        ROOMS_TABLE_NAME,
        ID_COLUMN,
        room_id,
        not_found_detail=f"No room found with id {room_id}",
        failure_detail=failure_detail,
        log_context={"room_id": room_id},
    )


@room_router.get("", response_model=RoomListResponse)
async def list_rooms(db=Depends(get_db)) -> RoomListResponse:
    records = await _fetch_records(
        db,
        ROOMS_TABLE_NAME,
        failure_detail="Unable to retrieve rooms due to an internal error.",
        log_context={},
    )
    return RoomListResponse(status=status.HTTP_200_OK, rooms=[Room(**record) for record in records])


@room_router.post(
    "",
    response_model=RoomResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_room(room: RoomPayload, db=Depends(get_db)) -> RoomResponse:
    """
    Add a Room to an existing hotel.

    Args:
        room: Room payload to persist.
        db: Supabase client injected via dependency.

    Returns:
        RoomResponse wrapping the created room.
    """

    failure_detail = "Unable to create room due to an internal error."
    _ = await _fetch_record(
        db,
        HOTELS_TABLE_NAME,
        "Hotel_id",
        room.Hotel_id,
        not_found_detail=f"No hotel found with id {room.Hotel_id}",
        failure_detail=failure_detail,
        log_context={"hotel_id": room.Hotel_id},
    )

    created = await _insert_record(
        db,
        ROOMS_TABLE_NAME,
        room.to_dict(),
        conflict_detail=f"Room already exists for hotel {room.Hotel_id}",
        failure_detail=failure_detail,
        log_context={"hotel_id": room.Hotel_id},
    )
    created_room = Room(**created)
    logger.info(
        "Room created",
        extra={"room_id": created_room.Room_id, "hotel_id": created_room.Hotel_id},
    )
    return RoomResponse(status=status.HTTP_201_CREATED, room=created_room)


@room_router.get(
    "/{room_id}",
    response_model=RoomResponse,
    status_code=status.HTTP_200_OK,
)
async def get_room(room_id: str, db=Depends(get_db)) -> RoomResponse:
    """
    Retrieve a single room by identifier.

    Args:
        room_id: Numeric id of the target room (path parameter).
        db: Supabase client injected via dependency.

    Returns:
        RoomResponse wrapping the requested room.
    """

    record_id = _parse_room_id(room_id, logger, ROOM)
    record = await _fetch_room_record(db, record_id, "Unable to retrieve room due to an internal error.")

    logger.info("Room retrieved", extra={"room_id": room_id})
    return RoomResponse(status=status.HTTP_200_OK, room=Room(**record))


@room_router.patch(
    "/{room_id}",
    response_model=RoomResponse,
    status_code=status.HTTP_200_OK,
)
async def update_room(room_id: str, fields: RoomFields, db=Depends(get_db)) -> RoomResponse:
    """
    Update mutable fields on an existing room.

    The merged record is validated before writing, so a non-positive price
    or capacity is rejected with 422.
    """

    record_id = _parse_room_id(room_id, logger, ROOM)
    updates = _require_updates(fields)
    failure_detail = "Unable to update room due to an internal error."

    existing = await _fetch_room_record(db, record_id, failure_detail)
    _validate_merged(Room, existing, updates)

    updates["Updated_at"] = utcnow_iso()
    await _update_record(
        db,
        ROOMS_TABLE_NAME,
        ID_COLUMN,
        record_id,
        updates,
        conflict_detail="Unable to update room due to a unique constraint violation.",
        failure_detail=failure_detail,
        log_context={"room_id": room_id, "updates": updates},
    )

    refreshed = await _fetch_room_record(db, record_id, failure_detail)
    logger.info("Room updated", extra={"room_id": room_id})
    return RoomResponse(status=status.HTTP_200_OK, room=Room(**refreshed))


@room_router.delete(
    "/{room_id}",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
)
async def delete_room(room_id: str, db=Depends(get_db)) -> MessageResponse:
    """Delete an existing room by identifier."""

    record_id = _parse_room_id(room_id, logger, ROOM)
    failure_detail = "Unable to delete room due to an internal error."

    _ = await _fetch_room_record(db, record_id, failure_detail)
    await _delete_record(
        db,
        ROOMS_TABLE_NAME,
        ID_COLUMN,
        record_id,
        failure_detail=failure_detail,
        log_context={"room_id": room_id},
    )

    logger.info("Room deleted", extra={"room_id": room_id})
    return MessageResponse(status=status.HTTP_200_OK, message=f"Room {record_id} deleted")
