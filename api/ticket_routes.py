"""Customer support ticket routes."""

import logging

from fastapi import APIRouter, Depends, status

from Database.db import TICKETS_TABLE_NAME, USERS_TABLE_NAME
from Database.deps import get_db
from Users.ticket import SupportTicket, TicketPayload
from utils import utcnow_iso

from .models import MessageResponse, TicketFields, TicketListResponse, TicketResponse
from .utils import (
    _delete_record,
    _fetch_record,
    _fetch_records,
    _insert_record,
    _parse_id as _parse_ticket_id,
    _require_updates,
    _update_record,
    _validate_merged,
)

logger = logging.getLogger(__name__)

TICKET = "ticket"
ID_COLUMN = "Ticket_id"

# mount api router
ticket_router = APIRouter()


async def _fetch_ticket_record(db, ticket_id: int, failure_detail: str) -> dict:
    return await _fetch_record(
        db,
        TICKETS_TABLE_NAME,
        ID_COLUMN,
        ticket_id,
        not_found_detail=f"No ticket found with id {ticket_id}",
        failure_detail=failure_detail,
        log_context={"ticket_id": ticket_id},
    )


@ticket_router.get("", response_model=TicketListResponse)
async def list_tickets(db=Depends(get_db)) -> TicketListResponse:
    records = await _fetch_records(
        db,
        TICKETS_TABLE_NAME,
        failure_detail="Unable to retrieve tickets due to an internal error.",
        log_context={},
    )
    return TicketListResponse(
        status=status.HTTP_200_OK, tickets=[SupportTicket(**record) for record in records]
    )


@ticket_router.post(
    "",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_ticket(ticket: TicketPayload, db=Depends(get_db)) -> TicketResponse:
    """Open a support ticket on behalf of an existing user."""

    failure_detail = "Unable to create ticket due to an internal error."
    _ = await _fetch_record(
        db,
        USERS_TABLE_NAME,
        "user_id",
        ticket.user_id,
        not_found_detail="User not found",
        failure_detail=failure_detail,
        log_context={"user_id": ticket.user_id},
    )

    created = await _insert_record(
        db,
        TICKETS_TABLE_NAME,
        ticket.to_dict(),
        conflict_detail="Ticket already exists",
        failure_detail=failure_detail,
        log_context={"user_id": ticket.user_id},
    )
    created_ticket = SupportTicket(**created)
    logger.info("Ticket created", extra={"ticket_id": created_ticket.Ticket_id})
    return TicketResponse(status=status.HTTP_201_CREATED, ticket=created_ticket)


@ticket_router.get("/{ticket_id}", response_model=TicketResponse)
async def get_ticket(ticket_id: str, db=Depends(get_db)) -> TicketResponse:
    record_id = _parse_ticket_id(ticket_id, logger, TICKET)
    record = await _fetch_ticket_record(
        db, record_id, "Unable to retrieve ticket due to an internal error."
    )
    return TicketResponse(status=status.HTTP_200_OK, ticket=SupportTicket(**record))


@ticket_router.patch("/{ticket_id}", response_model=TicketResponse)
async def update_ticket(ticket_id: str, fields: TicketFields, db=Depends(get_db)) -> TicketResponse:
    record_id = _parse_ticket_id(ticket_id, logger, TICKET)
    updates = _require_updates(fields)
    failure_detail = "Unable to update ticket due to an internal error."

    existing = await _fetch_ticket_record(db, record_id, failure_detail)
    _validate_merged(SupportTicket, existing, updates)

    updates["Updated_at"] = utcnow_iso()
    await _update_record(
        db,
        TICKETS_TABLE_NAME,
        ID_COLUMN,
        record_id,
        updates,
        conflict_detail="Unable to update ticket due to a unique constraint violation.",
        failure_detail=failure_detail,
        log_context={"ticket_id": ticket_id},
    )

    refreshed = await _fetch_ticket_record(db, record_id, failure_detail)
    logger.info("Ticket updated", extra={"ticket_id": ticket_id})
    return TicketResponse(status=status.HTTP_200_OK, ticket=SupportTicket(**refreshed))


@ticket_router.delete("/{ticket_id}", response_model=MessageResponse)
async def delete_ticket(ticket_id: str, db=Depends(get_db)) -> MessageResponse:
    record_id = _parse_ticket_id(ticket_id, logger, TICKET)
    failure_detail = "Unable to delete ticket due to an internal error."

    _ = await _fetch_ticket_record(db, record_id, failure_detail)
    await _delete_record(
        db,
        TICKETS_TABLE_NAME,
        ID_COLUMN,
        record_id,
        failure_detail=failure_detail,
        log_context={"ticket_id": ticket_id},
    )

    logger.info("Ticket deleted", extra={"ticket_id": ticket_id})
    return MessageResponse(status=status.HTTP_200_OK, message=f"Ticket {record_id} deleted")
