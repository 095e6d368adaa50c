"""Shared API dependencies: single import point for all routers.

Re-exports database session and authentication dependencies so that router
modules can import everything they need from one place::

    from app.api.deps import get_db, get_current_active_user
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import (
    get_current_active_user,
    get_current_user,
    get_optional_user,
    get_requester,
)
from app.availability.service import AvailabilityService
from app.availability.store import SqlAlchemyPropertyStore
from app.database import get_db


async def get_availability_service(db: AsyncSession = Depends(get_db)) -> AvailabilityService:
    """Availability service bound to the request's database session."""
    return AvailabilityService(SqlAlchemyPropertyStore(db))


__all__ = [
    "get_db",
    "get_current_user",
    "get_current_active_user",
    "get_optional_user",
    "get_requester",
    "get_availability_service",
]
