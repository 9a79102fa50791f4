"""Shared FastAPI dependencies."""

from gpc.database import get_session_factory
from gpc.store import RecordStore


def get_store() -> RecordStore:
    """Record store bound to the application's session factory."""
    return RecordStore(get_session_factory())
