'''
Payments settled against bookings.
'''
from typing import Literal, Optional
from datetime import date, datetime
from pydantic import BaseModel, model_validator
from utils import validate_timestamps, utcnow_iso

PaymentStatus = Literal['Pending', 'Completed', 'Failed', 'Refunded']


class PaymentPayload(BaseModel):

    Booking_id : int
    Amount : float
    Payment_status : PaymentStatus = 'Pending'
    Payment_date : date
    Payment_method : str
    Transaction_id : str

    @model_validator(mode="after")
    def validate_payment(self):
        if self.Amount <= 0:
            raise ValueError("Payment amount must be a positive number.")
        if not self.Transaction_id.strip():
            raise ValueError("Transaction_id must not be empty.")
        return self

    def to_dict(self) -> dict:
        now = utcnow_iso()
        return {
            **self.model_dump(),
            "Payment_date": self.Payment_date.isoformat(),
            "Created_at": now,
            "Updated_at": now,
        }


class Payment(PaymentPayload):

    Payment_id : int
    Created_at : Optional[datetime] = None
    Updated_at : Optional[datetime] = None

    @model_validator(mode="after")
    def validate_structure(self):
        validate_timestamps(self.Created_at, self.Updated_at)
        return self
