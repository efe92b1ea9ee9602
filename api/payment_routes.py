"""Payment-related FastAPI routes."""

import logging

from fastapi import APIRouter, Depends, status

from Database.db import BOOKINGS_TABLE_NAME, PAYMENTS_TABLE_NAME
from Database.deps import get_db
from Hotels.payment import Payment, PaymentPayload
from utils import utcnow_iso

from .models import MessageResponse, PaymentFields, PaymentListResponse, PaymentResponse
from .utils import (
    _delete_record,
    _fetch_record,
    _fetch_records,
    _insert_record,
    _parse_id as _parse_payment_id,
    _require_updates,
    _update_record,
    _validate_merged,
)

logger = logging.getLogger(__name__)

PAYMENT = "payment"
ID_COLUMN = "Payment_id"

# mount api router
payment_router = APIRouter()


async def _fetch_payment_record(db, payment_id: int, failure_detail: str) -> dict:
    return await _fetch_record(
        db,
        PAYMENTS_TABLE_NAME,
        ID_COLUMN,
        payment_id,
        not_found_detail=f"No payment found with id {payment_id}",
        failure_detail=failure_detail,
        log_context={"payment_id": payment_id},
    )


@payment_router.get("", response_model=PaymentListResponse)
async def list_payments(db=Depends(get_db)) -> PaymentListResponse:
    records = await _fetch_records(
        db,
        PAYMENTS_TABLE_NAME,
        failure_detail="Unable to retrieve payments due to an internal error.",
        log_context={},
    )
    return PaymentListResponse(
        status=status.HTTP_200_OK, payments=[Payment(**record) for record in records]
    )


@payment_router.post(
    "",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_payment(payment: PaymentPayload, db=Depends(get_db)) -> PaymentResponse:
    """
    Record a payment against an existing booking.

    Transaction ids are unique; a repeated id is answered with 409.
    """

    failure_detail = "Unable to create payment due to an internal error."
    _ = await _fetch_record(
        db,
        BOOKINGS_TABLE_NAME,
        "Booking_id",
        payment.Booking_id,
        not_found_detail=f"No booking found with id {payment.Booking_id}",
        failure_detail=failure_detail,
        log_context={"booking_id": payment.Booking_id},
    )

    created = await _insert_record(
        db,
        PAYMENTS_TABLE_NAME,
        payment.to_dict(),
        conflict_detail=f"Payment with transaction {payment.Transaction_id} already exists",
        failure_detail=failure_detail,
        log_context={"booking_id": payment.Booking_id, "transaction_id": payment.Transaction_id},
    )
    created_payment = Payment(**created)
    logger.info("Payment created", extra={"payment_id": created_payment.Payment_id})
    return PaymentResponse(status=status.HTTP_201_CREATED, payment=created_payment)


@payment_router.get("/{payment_id}", response_model=PaymentResponse)
async def get_payment(payment_id: str, db=Depends(get_db)) -> PaymentResponse:
    record_id = _parse_payment_id(payment_id, logger, PAYMENT)
    record = await _fetch_payment_record(
        db, record_id, "Unable to retrieve payment due to an internal error."
    )
    return PaymentResponse(status=status.HTTP_200_OK, payment=Payment(**record))


@payment_router.patch("/{payment_id}", response_model=PaymentResponse)
async def update_payment(payment_id: str, fields: PaymentFields, db=Depends(get_db)) -> PaymentResponse:
    record_id = _parse_payment_id(payment_id, logger, PAYMENT)
    updates = _require_updates(fields)
    failure_detail = "Unable to update payment due to an internal error."

    existing = await _fetch_payment_record(db, record_id, failure_detail)
    _validate_merged(Payment, existing, updates)

    updates["Updated_at"] = utcnow_iso()
    await _update_record(
        db,
        PAYMENTS_TABLE_NAME,
        ID_COLUMN,
        record_id,
        updates,
        conflict_detail="Unable to update payment due to a unique constraint violation.",
        failure_detail=failure_detail,
        log_context={"payment_id": payment_id},
    )

    refreshed = await _fetch_payment_record(db, record_id, failure_detail)
    logger.info("Payment updated", extra={"payment_id": payment_id})
    return PaymentResponse(status=status.HTTP_200_OK, payment=Payment(**refreshed))


@payment_router.delete("/{payment_id}", response_model=MessageResponse)
async def delete_payment(payment_id: str, db=Depends(get_db)) -> MessageResponse:
    record_id = _parse_payment_id(payment_id, logger, PAYMENT)
    failure_detail = "Unable to delete payment due to an internal error."

    _ = await _fetch_payment_record(db, record_id, failure_detail)
    await _delete_record(
        db,
        PAYMENTS_TABLE_NAME,
        ID_COLUMN,
        record_id,
        failure_detail=failure_detail,
        log_context={"payment_id": payment_id},
    )

    logger.info("Payment deleted", extra={"payment_id": payment_id})
    return MessageResponse(status=status.HTTP_200_OK, message=f"Payment {record_id} deleted")
