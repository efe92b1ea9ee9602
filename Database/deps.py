'''
FastAPI dependencies exposing the objects created at application startup.
'''
from fastapi import Request

from config import Settings


def get_db(request: Request):
    """Return the Supabase client created in the app lifespan."""
    return request.app.state.db


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_notifier(request: Request):
    """Return the notifier used for outgoing account emails."""
    return request.app.state.notifier
