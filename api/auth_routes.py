"""Registration, verification and login routes."""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status

from Auth.errors import AuthError
from Auth.notifier import NotificationDispatcher
from Auth.service import LOGIN_MESSAGE, AuthService
from Auth.store import CredentialStore
from Database.deps import get_db, get_notifier, get_settings
from Users.user import Registration

from .models import LoginRequest, LoginResponse, MessageResponse, VerificationRequest

logger = logging.getLogger(__name__)

# mount api router
auth_router = APIRouter()


def get_auth_service(
    background_tasks: BackgroundTasks,
    db=Depends(get_db),
    settings=Depends(get_settings),
    notifier=Depends(get_notifier),
) -> AuthService:
    """Assemble the auth service for one request."""
    return AuthService(
        CredentialStore(db),
        settings,
        NotificationDispatcher(notifier, background_tasks),
    )


def _as_http_error(exc: Exception, action: str) -> HTTPException:
    """
    Translate a failure of the auth flow into an HTTPException.

    Args:
        exc: Error raised while serving the request.
        action: Short label of the operation, for the log record.

    Returns:
        HTTPException carrying the status bound to the error.
    """
    if isinstance(exc, AuthError):
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(f"{action} failed", extra={"error": exc.detail})
        return HTTPException(status_code=exc.status_code, detail=exc.detail)

    logger.exception(f"{action} failed with an unexpected error")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Internal server error: {exc}",
    )


@auth_router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    registration: Registration, service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    """
    Create an unverified account and email it a verification code.

    Args:
        registration: Candidate account payload.
        service: Auth service injected via dependency.

    Returns:
        MessageResponse confirming the registration.
    """

    try:
        message = await service.register(registration)
    except Exception as exc:
        raise _as_http_error(exc, "Registration") from exc
    return MessageResponse(status=status.HTTP_201_CREATED, message=message)


@auth_router.post("/verify", response_model=MessageResponse)
async def verify(
    request: VerificationRequest, service: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    """Mark an account verified when the emailed code matches."""

    try:
        message = await service.verify(request.email, request.code)
    except Exception as exc:
        raise _as_http_error(exc, "Verification") from exc
    return MessageResponse(status=status.HTTP_200_OK, message=message)


@auth_router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest, service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    """
    Authenticate a verified account.

    Returns:
        LoginResponse with a signed token valid for 24 hours and the
        account projection (no password).
    """

    try:
        result = await service.login(request.email, request.Password)
    except Exception as exc:
        raise _as_http_error(exc, "Login") from exc
    return LoginResponse(
        status=status.HTTP_200_OK,
        message=LOGIN_MESSAGE,
        token=result.token,
        user=result.user,
    )
