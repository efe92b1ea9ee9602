"""Account model and the projections handed out to clients."""
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from datetime import datetime                                       # noqa: E402
from email.utils import parseaddr                                   # noqa: E402
from pydantic import BaseModel, field_validator, model_validator    # noqa: E402
from typing import Literal, Optional                                # noqa: E402
from utils import validate_timestamps                               # noqa: E402

AccountRole = Literal["admin", "user"]

REQUIRED_REGISTRATION_FIELDS = ("Email", "Password")


class Registration(BaseModel):
    """Candidate account submitted to the register endpoint."""

    First_name: Optional[str] = None
    Last_name: Optional[str] = None
    Email: Optional[str] = None
    Password: Optional[str] = None
    Contact_phone: Optional[int] = None
    Address: Optional[str] = None
    Role: AccountRole = "user"

    @field_validator("Email")
    @classmethod
    def email_format(cls, value: Optional[str]) -> Optional[str]:
        """
        Validate the email address without altering it.

        Emails are matched case-sensitively, so no normalization happens here.

        Raises:
            ValueError: If the email address is malformed.
        """
        if value is None:
            return value
        parsed = parseaddr(value)[1]
        if "@" not in parsed or parsed != value:
            raise ValueError("Invalid email address format.")
        return value

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_REGISTRATION_FIELDS if not getattr(self, name)]

    @property
    def display_name(self) -> str:
        return self.Last_name or self.First_name or "there"


class AccountPublic(BaseModel):
    """Login projection of an account. Carries no credential material."""

    user_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    role: AccountRole


class UserProfile(BaseModel):
    """Profile projection returned by the users endpoints."""

    user_id: int
    First_name: Optional[str] = None
    Last_name: Optional[str] = None
    Email: str
    Contact_phone: Optional[int] = None
    Address: Optional[str] = None
    Role: AccountRole = "user"
    isVerified: bool = False
    Created_at: Optional[datetime] = None
    Updated_at: Optional[datetime] = None


class Account(BaseModel):
    """A persisted user record, including its credential and verification state."""

    user_id: int
    First_name: Optional[str] = None
    Last_name: Optional[str] = None
    Email: str
    Password: str
    Contact_phone: Optional[int] = None
    Address: Optional[str] = None
    Role: AccountRole = "user"
    isVerified: bool = False
    verificationCode: Optional[str] = None
    Created_at: Optional[datetime] = None
    Updated_at: Optional[datetime] = None

    @model_validator(mode="after")
    def validate_structure(self):
        # enforce chronological consistency
        validate_timestamps(self.Created_at, self.Updated_at)
        return self

    @property
    def display_name(self) -> str:
        return self.Last_name or self.First_name or self.Email

    def public(self) -> AccountPublic:
        """
        Build the projection returned on a successful login.

        Returns:
            AccountPublic: id, names, email and role only.
        """
        return AccountPublic(
            user_id=self.user_id,
            first_name=self.First_name,
            last_name=self.Last_name,
            email=self.Email,
            role=self.Role,
        )

    def profile(self) -> UserProfile:
        return UserProfile(**self.model_dump(exclude={"Password", "verificationCode"}))
