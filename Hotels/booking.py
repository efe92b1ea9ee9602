from typing import Literal, Optional
from datetime import date, datetime
from pydantic import BaseModel, model_validator
from utils import validate_timestamps, utcnow_iso

BookingStatus = Literal['Pending', 'Confirmed', 'Cancelled']


class BookingPayload(BaseModel):

    user_id : int
    Room_id : int
    Check_in_date : date
    Check_out_date : date
    Total_amount : float
    Booking_status : BookingStatus = 'Pending'

    @model_validator(mode="after")
    def validate_dates(self):
        # enforce chronological consistency
        if self.Check_out_date <= self.Check_in_date:
            raise ValueError("Check_out_date must be strictly greater than Check_in_date")
        if self.Total_amount <= 0:
            raise ValueError("Total_amount must be a positive number.")
        return self

    @property
    def nights(self) -> int:
        return (self.Check_out_date - self.Check_in_date).days

    def to_dict(self) -> dict:
        now = utcnow_iso()
        return {
            **self.model_dump(),
            "Check_in_date": self.Check_in_date.isoformat(),
            "Check_out_date": self.Check_out_date.isoformat(),
            "Created_at": now,
            "Updated_at": now,
        }


class Booking(BookingPayload):

    Booking_id : int
    Created_at : Optional[datetime] = None
    Updated_at : Optional[datetime] = None

    @model_validator(mode = "after")
    def validate_booking(self):
        # enforce chronological consistency
        try:
            validate_timestamps(self.Created_at, self.Updated_at)
        except ValueError as e:
            raise ValueError(f"Booking {self.Booking_id} has invalid timestamps: {e}")
        return self
