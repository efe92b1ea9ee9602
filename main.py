'''
FastAPI application for the Hotel Booking API.

The app exposes endpoints to register and authenticate accounts and to manage
the hotel back office.

Available endpoints:
- /api/auth: Register, verify and log in accounts.
- /api/users: Read, update, delete user profiles.
- /api/hotels: Create, read, update, delete hotels and list their rooms.
- /api/rooms: Create, read, update, delete rooms.
- /api/bookings: Create, read, update, delete bookings.
- /api/payments: Create, read, update, delete payments.
- /api/tickets: Create, read, update, delete customer support tickets.
'''

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from Auth.notifier import build_notifier
from config import Settings
from Database.db import HotelDB

# routers
from api.auth_routes import auth_router
from api.booking_routes import booking_router
from api.hotel_routes import hotel_router
from api.payment_routes import payment_router
from api.room_routes import room_router
from api.ticket_routes import ticket_router
from api.user_routes import user_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    app.state.db = HotelDB(app.state.settings).client   # create ONCE
    logger.info("Database client ready")
    yield


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 Bad Request."""

    logger.warning("Rejected malformed request", extra={"path": request.url.path})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application with its routers and shared state.

    Args:
        settings: Runtime settings; read from the environment when omitted.

    Returns:
        FastAPI: The configured application. The database client is opened
        by the lifespan on startup.
    """

    settings = settings or Settings.from_env()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    app = FastAPI(title="Hotel Booking API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.notifier = build_notifier(settings)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
    app.include_router(user_router, prefix="/api/users", tags=["Users"])
    app.include_router(hotel_router, prefix="/api/hotels", tags=["Hotels"])
    app.include_router(room_router, prefix="/api/rooms", tags=["Rooms"])
    app.include_router(booking_router, prefix="/api/bookings", tags=["Bookings"])
    app.include_router(payment_router, prefix="/api/payments", tags=["Payments"])
    app.include_router(ticket_router, prefix="/api/tickets", tags=["Tickets"])

    @app.get("/")
    async def root():
        return {"message": "Welcome to the Hotel Booking API"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="localhost", port=8000, reload=True)
