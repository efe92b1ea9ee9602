'''
Customer support tickets raised by users.
'''
from typing import Literal, Optional
from datetime import datetime
from pydantic import BaseModel, model_validator
from utils import validate_timestamps, utcnow_iso

TicketStatus = Literal['Open', 'In Progress', 'Resolved', 'Closed']


class TicketPayload(BaseModel):

    user_id : int
    Subject : str
    Description : str
    Status : TicketStatus = 'Open'

    @model_validator(mode="after")
    def validate_ticket(self):
        if not self.Subject.strip():
            raise ValueError("Ticket subject must not be empty.")
        return self

    def to_dict(self) -> dict:
        now = utcnow_iso()
        return {**self.model_dump(), "Created_at": now, "Updated_at": now}


class SupportTicket(TicketPayload):

    Ticket_id : int
    Created_at : Optional[datetime] = None
    Updated_at : Optional[datetime] = None

    @model_validator(mode="after")
    def validate_structure(self):
        # enforce chronological consistency
        validate_timestamps(self.Created_at, self.Updated_at)
        return self
