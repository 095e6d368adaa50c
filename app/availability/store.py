"""Persistence collaborator for property ledgers."""

import uuid
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.property import Property


class PropertyStore(Protocol):
    """What the availability service needs from storage.

    ``save_property`` must apply the whole partial update atomically.
    """

    async def load_property(self, property_id: uuid.UUID, *, for_update: bool = False) -> Property | None: ...

    async def save_property(self, property_id: uuid.UUID, update: dict[str, Any]) -> Property: ...


class SqlAlchemyPropertyStore:
    """Loads and saves properties through an async SQLAlchemy session.

    Mutating loads take a row lock (``SELECT ... FOR UPDATE``) so writers in
    other processes queue behind the current one; dialects without row
    locks ignore the clause. Saves commit immediately so the row lock and
    the caller's in-process lock are released with the data already durable.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def load_property(self, property_id: uuid.UUID, *, for_update: bool = False) -> Property | None:
        query = select(Property).where(Property.id == property_id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def save_property(self, property_id: uuid.UUID, update: dict[str, Any]) -> Property:
        prop = await self.load_property(property_id)
        if prop is None:
            raise LookupError(f"Property {property_id} disappeared during update")

        for field, value in update.items():
            setattr(prop, field, value)

        self.db.add(prop)
        await self.db.flush()
        await self.db.commit()
        await self.db.refresh(prop)
        return prop
