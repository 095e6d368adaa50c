"""User favorites: bookmarking properties and flagging them in listings."""

import logging
import uuid
from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.favorite import Favorite
from app.models.property import Property

logger = logging.getLogger(__name__)


async def toggle_favorite(db: AsyncSession, user_id: uuid.UUID, property_id: uuid.UUID) -> bool:
    """Add the property to the user's favorites, or remove it if already there.

    Returns:
        ``True`` if the property is a favorite after the call.
    """
    result = await db.execute(
        select(Favorite).where(Favorite.user_id == user_id, Favorite.property_id == property_id)
    )
    existing = result.scalar_one_or_none()

    if existing is not None:
        await db.execute(delete(Favorite).where(Favorite.id == existing.id))
        await db.flush()
        logger.info("User %s removed property %s from favorites", user_id, property_id)
        return False

    db.add(Favorite(user_id=user_id, property_id=property_id))
    await db.flush()
    logger.info("User %s added property %s to favorites", user_id, property_id)
    return True


async def favorite_property_ids(
    db: AsyncSession,
    user_id: uuid.UUID,
    property_ids: Iterable[uuid.UUID] | None = None,
) -> set[uuid.UUID]:
    """Ids of the user's favorite properties, optionally limited to ``property_ids``."""
    query = select(Favorite.property_id).where(Favorite.user_id == user_id)
    if property_ids is not None:
        ids = list(property_ids)
        if not ids:
            return set()
        query = query.where(Favorite.property_id.in_(ids))
    result = await db.execute(query)
    return set(result.scalars().all())


async def list_favorite_properties(db: AsyncSession, user_id: uuid.UUID) -> list[Property]:
    """Active properties the user has bookmarked, most recently bookmarked first.

    Favorites on soft-deleted properties are kept but not listed.
    """
    result = await db.execute(
        select(Property)
        .join(Favorite, Favorite.property_id == Property.id)
        .where(Favorite.user_id == user_id, Property.is_active.is_(True))
        .order_by(Favorite.created_at.desc())
    )
    return list(result.scalars().all())
