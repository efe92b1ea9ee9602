"""User profile routes. Accounts are created through the auth routes."""

import logging

from fastapi import APIRouter, Depends, status

from Database.db import USERS_TABLE_NAME
from Database.deps import get_db
from Users.user import Account

from .models import MessageResponse, UserFields, UserListResponse, UserResponse
from .utils import (
    _delete_record,
    _fetch_record,
    _fetch_records,
    _parse_id,
    _require_updates,
    _update_record,
)
from utils import utcnow_iso

logger = logging.getLogger(__name__)

USER = "user"
ID_COLUMN = "user_id"
NULLABLE_COLUMNS = ("First_name", "Last_name", "Contact_phone", "Address")

# mount api router
user_router = APIRouter()


@user_router.get("/health", response_model=MessageResponse)
async def health_check() -> MessageResponse:
    return MessageResponse(status=status.HTTP_200_OK, message="User service is healthy")


@user_router.get("", response_model=UserListResponse)
async def list_users(db=Depends(get_db)) -> UserListResponse:
    """List every user profile."""

    records = await _fetch_records(
        db,
        USERS_TABLE_NAME,
        failure_detail="Unable to retrieve users due to an internal error.",
        log_context={},
    )
    users = [Account(**record).profile() for record in records]
    logger.info("Users retrieved", extra={"count": len(users)})
    return UserListResponse(status=status.HTTP_200_OK, users=users)


@user_router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, db=Depends(get_db)) -> UserResponse:
    """
    Retrieve a single user by identifier.

    Args:
        user_id: Numeric id of the target user (path parameter).
        db: Supabase client injected via dependency.

    Returns:
        UserResponse wrapping the profile, without credentials.
    """

    record_id = _parse_id(user_id, logger, USER)
    record = await _fetch_record(
        db,
        USERS_TABLE_NAME,
        ID_COLUMN,
        record_id,
        not_found_detail="User not found",
        failure_detail="Unable to retrieve user due to an internal error.",
        log_context={"user_id": user_id},
    )
    logger.info("User retrieved", extra={"user_id": user_id})
    return UserResponse(status=status.HTTP_200_OK, user=Account(**record).profile())


@user_router.patch("/{user_id}", response_model=UserResponse)
async def update_user(user_id: str, fields: UserFields, db=Depends(get_db)) -> UserResponse:
    """Update profile fields on an existing user."""

    record_id = _parse_id(user_id, logger, USER)
    updates = _require_updates(fields, NULLABLE_COLUMNS)
    log_context = {"user_id": user_id}

    _ = await _fetch_record(
        db,
        USERS_TABLE_NAME,
        ID_COLUMN,
        record_id,
        not_found_detail="User not found",
        failure_detail="Unable to update user due to an internal error.",
        log_context=log_context,
    )

    updates["Updated_at"] = utcnow_iso()
    await _update_record(
        db,
        USERS_TABLE_NAME,
        ID_COLUMN,
        record_id,
        updates,
        conflict_detail="Unable to update user due to a unique constraint violation.",
        failure_detail="Unable to update user due to an internal error.",
        log_context=log_context,
    )

    refreshed = await _fetch_record(
        db,
        USERS_TABLE_NAME,
        ID_COLUMN,
        record_id,
        not_found_detail="User not found",
        failure_detail="Unable to update user due to an internal error.",
        log_context=log_context,
    )
    logger.info("User updated", extra=log_context)
    return UserResponse(status=status.HTTP_200_OK, user=Account(**refreshed).profile())


@user_router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: str, db=Depends(get_db)) -> MessageResponse:

    record_id = _parse_id(user_id, logger, USER)
    log_context = {"user_id": user_id}

    _ = await _fetch_record(
        db,
        USERS_TABLE_NAME,
        ID_COLUMN,
        record_id,
        not_found_detail="User not found",
        failure_detail="Unable to delete user due to an internal error.",
        log_context=log_context,
    )
    await _delete_record(
        db,
        USERS_TABLE_NAME,
        ID_COLUMN,
        record_id,
        failure_detail="Unable to delete user due to an internal error.",
        log_context=log_context,
    )

    logger.info("User deleted", extra=log_context)
    return MessageResponse(status=status.HTTP_200_OK, message=f"User {record_id} deleted")
