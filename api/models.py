"""Shared API request and response models for the Hotel Booking API."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, field_validator

from Users.user import AccountPublic, AccountRole, UserProfile
from Users.ticket import SupportTicket, TicketStatus
from Hotels.structure import Hotel, Room
from Hotels.booking import Booking, BookingStatus
from Hotels.payment import Payment, PaymentStatus


class VerificationRequest(BaseModel):
    """Payload accepted by the verify endpoint."""

    email: Optional[str] = None
    code: Optional[str] = None

    @field_validator("code", mode="before")
    @classmethod
    def code_as_text(cls, value):
        # codes are stored as text, clients may send them as numbers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class LoginRequest(BaseModel):
    """Payload accepted by the login endpoint."""

    email: Optional[str] = None
    Password: Optional[str] = None


class UserFields(BaseModel):
    """Payload accepted when updating an existing user."""

    First_name: Optional[str] = None
    Last_name: Optional[str] = None
    Contact_phone: Optional[int] = None
    Address: Optional[str] = None
    Role: Optional[AccountRole] = None

class HotelFields(BaseModel):
    """Payload accepted when updating an existing hotel."""

    Name : Optional[str] = None
    Location : Optional[str] = None
    Address : Optional[str] = None
    Contact_phone : Optional[int] = None
    Category : Optional[str] = None
    Rating : Optional[float] = None

class RoomFields(BaseModel):
    """Payload accepted when updating an existing room."""

    Room_type : Optional[str] = None
    Price_per_night : Optional[float] = None
    Capacity : Optional[int] = None
    Amenities : Optional[str] = None
    is_available : Optional[bool] = None

class BookingFields(BaseModel):
    """Payload accepted when updating an existing booking."""

    Check_in_date : Optional[date] = None
    Check_out_date : Optional[date] = None
    Total_amount : Optional[float] = None
    Booking_status : Optional[BookingStatus] = None

class PaymentFields(BaseModel):
    """Payload accepted when updating an existing payment."""

    Amount : Optional[float] = None
    Payment_status : Optional[PaymentStatus] = None
    Payment_date : Optional[date] = None
    Payment_method : Optional[str] = None

class TicketFields(BaseModel):
    """Payload accepted when updating an existing support ticket."""

    Subject : Optional[str] = None
    Description : Optional[str] = None
    Status : Optional[TicketStatus] = None


class MessageResponse(BaseModel):
    """Envelope for simple string responses."""

    status: int
    message: str


class LoginResponse(MessageResponse):
    """Envelope for a successful login."""

    token: str
    user: AccountPublic


class UserResponse(BaseModel):
    """Envelope for responses that include a user resource."""

    status: int
    user: UserProfile

class UserListResponse(BaseModel):
    status: int
    users: list[UserProfile]

class HotelResponse(BaseModel):
    """Envelope for responses that include a hotel resource."""

    status: int
    hotel: Hotel

class HotelListResponse(BaseModel):
    status: int
    hotels: list[Hotel]

class RoomResponse(BaseModel):
    """Envelope for responses that include a room resource."""

    status: int
    room: Room

class RoomListResponse(BaseModel):
    """Envelope for responses that include a list of rooms resource."""

    status: int
    rooms: list[Room]

class BookingResponse(BaseModel):
    status: int
    booking: Booking

class BookingListResponse(BaseModel):
    status: int
    bookings: list[Booking]

class PaymentResponse(BaseModel):
    status: int
    payment: Payment

class PaymentListResponse(BaseModel):
    status: int
    payments: list[Payment]

class TicketResponse(BaseModel):
    status: int
    ticket: SupportTicket

class TicketListResponse(BaseModel):
    status: int
    tickets: list[SupportTicket]
