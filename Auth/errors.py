'''
Failures raised by the authentication flow, each bound to its HTTP status.
'''
from fastapi import status


class AuthError(Exception):
    """Base class for every auth flow failure."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class MissingFieldsError(AuthError):
    status_code = status.HTTP_400_BAD_REQUEST


class AccountNotCreatedError(AuthError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidVerificationCodeError(AuthError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidCredentialsError(AuthError):
    status_code = status.HTTP_401_UNAUTHORIZED


class AccountNotVerifiedError(AuthError):
    status_code = status.HTTP_403_FORBIDDEN


class AccountNotFoundError(AuthError):
    status_code = status.HTTP_404_NOT_FOUND


class EmailInUseError(AuthError):
    status_code = status.HTTP_409_CONFLICT


class SigningSecretMissingError(AuthError):
    """Raised when a token must be signed but no secret is configured."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
