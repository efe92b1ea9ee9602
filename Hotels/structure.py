'''
Structure class implementation for Hotels module.
'''
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, model_validator
from utils import validate_timestamps, utcnow_iso


class RoomPayload(BaseModel):

    Hotel_id : int
    Room_type : str
    Price_per_night : float
    Capacity : int
    Amenities : str = ""
    is_available : bool = True

    @model_validator(mode="after")
    def validate_room(self):
        # enforce positive price and capacity
        if self.Price_per_night <= 0:
            raise ValueError("Room price must be a positive number.")
        if self.Capacity <= 0:
            raise ValueError("Room capacity must be a positive integer.")
        return self

    def to_dict(self) -> dict:
        """
        Serialize the room into an insertable row.

        Returns:
            dict: Column mapping with server-assigned timestamps.
        """
        now = utcnow_iso()
        return {**self.model_dump(), "Created_at": now, "Updated_at": now}


class Room(RoomPayload):

    Room_id : int
    Created_at : Optional[datetime] = None
    Updated_at : Optional[datetime] = None

    @model_validator(mode="after")
    def validate_structure(self):
        # enforce chronological consistency
        validate_timestamps(self.Created_at, self.Updated_at)
        return self


class HotelPayload(BaseModel):

    Name : str
    Location : str
    Address : str
    Contact_phone : int
    Category : str
    Rating : float = 0

    @model_validator(mode="after")
    def validate_hotel(self):
        if not 0 <= self.Rating <= 5:
            raise ValueError("Hotel rating must be between 0 and 5.")
        return self

    def to_dict(self) -> dict:
        """
        Serialize the hotel into an insertable row.

        Returns:
            dict: Column mapping with server-assigned timestamps.
        """
        now = utcnow_iso()
        return {**self.model_dump(), "Created_at": now, "Updated_at": now}


class Hotel(HotelPayload):

    Hotel_id : int
    Created_at : Optional[datetime] = None
    Updated_at : Optional[datetime] = None

    @model_validator(mode="after")
    def validate_structure(self):
        # enforce chronological consistency
        validate_timestamps(self.Created_at, self.Updated_at)
        return self
