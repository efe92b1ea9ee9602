"""
Registration, email verification and login.

Each operation is one request/response cycle against the credential store.
Failures are raised as AuthError subclasses carrying their HTTP status.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from postgrest.exceptions import APIError

from config import Settings
from Database.db import is_unique_violation
from Users.user import AccountPublic, Registration

from .errors import (
    AccountNotCreatedError,
    AccountNotFoundError,
    AccountNotVerifiedError,
    EmailInUseError,
    InvalidCredentialsError,
    InvalidVerificationCodeError,
    MissingFieldsError,
)
from .notifier import NotificationDispatcher, verification_email, verified_email
from .security import PasswordHasher, TokenSigner, generate_verification_code
from .store import CredentialStore

logger = logging.getLogger(__name__)

REGISTERED_MESSAGE = "User created. Verification code sent to email."
VERIFIED_MESSAGE = "User verified successfully"
LOGIN_MESSAGE = "Login successful"


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: AccountPublic


class AuthService:
    """Orchestrates the account lifecycle: unverified, then verified."""

    def __init__(
        self,
        store: CredentialStore,
        settings: Settings,
        notifications: NotificationDispatcher,
        hasher: Optional[PasswordHasher] = None,
    ):
        self.store = store
        self.settings = settings
        self.notifications = notifications
        self.hasher = hasher or PasswordHasher(settings.bcrypt_rounds)

    async def register(self, registration: Registration) -> str:
        """
        Create an unverified account and email its verification code.

        Args:
            registration: Candidate account payload.

        Returns:
            str: Confirmation message, free of the code and the account id.

        Raises:
            EmailInUseError: The email already belongs to an account.
            AccountNotCreatedError: Required fields missing or no row written.
        """
        if registration.Email:
            existing = await self.store.get_by_email(registration.Email)
            if existing is not None:
                logger.info("Registration rejected, email in use", extra={"email": registration.Email})
                raise EmailInUseError("Email already in use")

        missing = registration.missing_fields()
        if missing:
            raise AccountNotCreatedError(f"User not created: missing {', '.join(missing)}")

        password_hash = await run_in_threadpool(self.hasher.hash, registration.Password)
        code = generate_verification_code()
        record = {
            **registration.model_dump(exclude={"Password"}),
            "Password": password_hash,
            "isVerified": False,
            "verificationCode": code,
        }

        try:
            account = await self.store.create(record)
        except APIError as exc:
            if is_unique_violation(exc):
                logger.info(
                    "Duplicate registration blocked by unique constraint",
                    extra={"email": registration.Email, "error_code": getattr(exc, "code", None)},
                )
                raise EmailInUseError("Email already in use") from exc
            raise

        if account is None:
            logger.error("Account insert returned no row", extra={"email": registration.Email})
            raise AccountNotCreatedError("User not created")

        self.notifications.dispatch(
            verification_email(account.Email, registration.display_name, code)
        )
        logger.info("Account registered", extra={"user_id": account.user_id})
        return REGISTERED_MESSAGE

    async def verify(self, email: Optional[str], code: Optional[str]) -> str:
        """
        Confirm email ownership with the code sent at registration.

        Raises:
            MissingFieldsError: email or code absent.
            AccountNotFoundError: No account for the email.
            InvalidVerificationCodeError: Code does not match; nothing changes.
        """
        if not email or not code:
            raise MissingFieldsError("Email and code are required")

        account = await self.store.get_by_email(email)
        if account is None:
            raise AccountNotFoundError("User not found")

        if account.verificationCode is None or account.verificationCode != code:
            logger.info("Verification code mismatch", extra={"email": email})
            raise InvalidVerificationCodeError("Invalid verification code")

        await self.store.mark_verified(email)
        self.notifications.dispatch(verified_email(email, account.display_name))
        return VERIFIED_MESSAGE

    async def login(self, email: Optional[str], password: Optional[str]) -> LoginResult:
        """
        Authenticate a verified account and issue a 24-hour token.

        Raises:
            MissingFieldsError: email or password absent.
            AccountNotFoundError: No account for the email.
            AccountNotVerifiedError: The account has not been verified yet.
            InvalidCredentialsError: Password does not match.
            SigningSecretMissingError: No JWT secret configured.
        """
        if not email or not password:
            raise MissingFieldsError("Email and password are required")

        account = await self.store.get_by_email(email)
        if account is None:
            raise AccountNotFoundError("User not found")

        if not account.isVerified:
            raise AccountNotVerifiedError("Account not verified")

        matches = await run_in_threadpool(self.hasher.verify, password, account.Password)
        if not matches:
            logger.info("Login rejected, bad credentials", extra={"user_id": account.user_id})
            raise InvalidCredentialsError("Invalid credentials")

        signer = TokenSigner.from_settings(self.settings)
        token = signer.issue(account)
        logger.info("Login successful", extra={"user_id": account.user_id})
        return LoginResult(token=token, user=account.public())
