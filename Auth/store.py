"""Account persistence for the authentication flow."""

import logging
from typing import Any, Optional

from fastapi.concurrency import run_in_threadpool

from Database.db import USERS_TABLE_NAME
from Users.user import Account
from utils import utcnow_iso

logger = logging.getLogger(__name__)


class CredentialStore:
    """Read and write account rows in the users table."""

    def __init__(self, db: Any):
        self.db = db

    async def get_by_email(self, email: str) -> Optional[Account]:
        """
        Look up an account by exact email match.

        Args:
            email: Email as supplied by the client, compared case-sensitively.

        Returns:
            The matching account, or None.
        """
        result = await run_in_threadpool(
            lambda: self.db.table(USERS_TABLE_NAME).select("*").eq("Email", email).execute()
        )
        if not result.data:
            return None
        return Account(**result.data[0])

    async def create(self, record: dict[str, Any]) -> Optional[Account]:
        """
        Insert a new account row.

        Returns:
            The created account, or None when the store returned no row.

        Raises:
            postgrest.exceptions.APIError: On constraint violations.
        """
        now = utcnow_iso()
        row = {**record, "Created_at": now, "Updated_at": now}
        result = await run_in_threadpool(
            lambda: self.db.table(USERS_TABLE_NAME).insert(row).execute()
        )
        if not result.data:
            return None
        return Account(**result.data[0])

    async def mark_verified(self, email: str) -> None:
        """Flag the account as verified and clear its code in a single update."""
        await run_in_threadpool(
            lambda: self.db.table(USERS_TABLE_NAME)
            .update({"isVerified": True, "verificationCode": None, "Updated_at": utcnow_iso()})
            .eq("Email", email)
            .execute()
        )
        logger.info("Account verified", extra={"email": email})
