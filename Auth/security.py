"""
Password hashing, verification codes and signed login tokens.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
import jwt

from config import Settings
from Users.user import Account

from .errors import SigningSecretMissingError

logger = logging.getLogger(__name__)

VERIFICATION_CODE_FLOOR = 3800
VERIFICATION_CODE_SPAN = 8888
TOKEN_TTL = timedelta(hours=24)
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """
    One-way salted password hashing backed by bcrypt.

    Args:
        rounds: bcrypt cost factor (4-31).
    """

    MIN_ROUNDS = 4
    MAX_ROUNDS = 31

    def __init__(self, rounds: int = 10):
        if not (self.MIN_ROUNDS <= rounds <= self.MAX_ROUNDS):
            raise ValueError(
                f"Rounds must be between {self.MIN_ROUNDS} and {self.MAX_ROUNDS}, got {rounds}"
            )
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password with a fresh salt.

        bcrypt only reads the first 72 bytes, so longer passwords are cut
        there. `verify` applies the same cut.

        Raises:
            ValueError: If the password is empty.
        """
        if not password:
            raise ValueError("Password cannot be empty")
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("utf-8")

    def verify(self, password: str, hashed_password: str) -> bool:
        """Check a plaintext password against a stored hash."""
        if not password or not hashed_password:
            return False
        try:
            return bcrypt.checkpw(_encode(password), hashed_password.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False


def generate_verification_code() -> str:
    """Numeric code in [3800, 12688) emailed to new accounts."""
    return str(VERIFICATION_CODE_FLOOR + secrets.randbelow(VERIFICATION_CODE_SPAN))


class TokenSigner:
    """
    Issue HS256-signed login tokens.

    A signer cannot exist without a secret, so an unsigned token is never
    produced.
    """

    def __init__(self, secret: Optional[str], algorithm: str = "HS256"):
        if not secret:
            raise SigningSecretMissingError("JWT secret is not configured")
        self._secret = secret
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenSigner":
        return cls(settings.jwt_secret, settings.jwt_algorithm)

    def issue(self, account: Account, now: Optional[datetime] = None) -> str:
        """
        Sign the login claims for an account.

        Args:
            account: Authenticated account.
            now: Issuance time, defaults to the current UTC time.

        Returns:
            str: Encoded token expiring 24 hours after issuance.
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "user_id": account.user_id,
            "first_name": account.First_name,
            "last_name": account.Last_name,
            "role": account.Role,
            "exp": int(issued_at.timestamp()) + int(TOKEN_TTL.total_seconds()),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        return jwt.decode(token, self._secret, algorithms=[self.algorithm])
