"""Properties CRUD API routes.

Listings are public. Only the owner or an admin may edit or delete a
property; anyone else gets 403. Deletion is a soft delete (``is_active``),
and inactive properties are invisible everywhere.

Authenticated callers also see ``is_favorite`` on each listed property and
can bookmark properties through the favorites endpoints.
"""

import logging
import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_active_user, get_db, get_optional_user, get_requester
from app.availability.service import Requester, can_manage
from app.models.property import Property
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.property import (
    FavoriteToggleResponse,
    PropertyCreate,
    PropertyListResponse,
    PropertyResponse,
    PropertyUpdate,
)
from app.services import favorite_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def get_active_property(db: AsyncSession, property_id: uuid.UUID) -> Property:
    """Fetch an active property or raise 404."""
    result = await db.execute(select(Property).where(Property.id == property_id, Property.is_active.is_(True)))
    prop = result.scalar_one_or_none()
    if prop is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Property not found",
        )
    return prop


def ensure_can_manage(prop: Property, requester: Requester, action: str = "edit") -> None:
    """Raise 403 unless the requester owns the property or is an admin."""
    if not can_manage(prop, requester):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You do not have permission to {action} this property",
        )


async def to_responses(db: AsyncSession, props: list[Property], user: User | None) -> list[PropertyResponse]:
    """Serialize properties, flagging the ones ``user`` has bookmarked."""
    favorites: set[uuid.UUID] = set()
    if user is not None:
        favorites = await favorite_service.favorite_property_ids(db, user.id, [p.id for p in props])
    return [PropertyResponse.model_validate(p).model_copy(update={"is_favorite": p.id in favorites}) for p in props]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new property",
)
async def create_property(
    body: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> PropertyResponse:
    """Create a property owned by the authenticated user, with an empty calendar."""
    prop = Property(
        owner_id=current_user.id,
        availability=[],
        **body.model_dump(),
    )
    db.add(prop)
    await db.flush()
    await db.refresh(prop)
    logger.info("User %s created property %s", current_user.id, prop.id)
    return PropertyResponse.model_validate(prop)


@router.get(
    "",
    response_model=PropertyListResponse,
    summary="List active properties",
)
async def list_properties(
    status_filter: str | None = Query(None, alias="status"),
    property_type: str | None = Query(None),
    transaction_type: str | None = Query(None),
    locality: str | None = Query(None),
    neighborhood: str | None = Query(None),
    min_price: Decimal | None = Query(None, ge=0, description="Minimum nightly base price"),
    max_price: Decimal | None = Query(None, ge=0, description="Maximum nightly base price"),
    min_bedrooms: int | None = Query(None, ge=0),
    min_bathrooms: int | None = Query(None, ge=0),
    min_guests: int | None = Query(None, ge=1),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_optional_user),
) -> PropertyListResponse:
    """Return a paginated list of active properties, newest first.

    Text filters match case-insensitively on a substring; numeric filters are
    inclusive bounds.
    """
    filters = [Property.is_active.is_(True)]
    if status_filter is not None:
        filters.append(Property.status == status_filter)
    if property_type is not None:
        filters.append(Property.property_type == property_type)
    if transaction_type is not None:
        filters.append(Property.transaction_type == transaction_type)
    if locality is not None:
        filters.append(Property.locality.ilike(f"%{locality}%"))
    if neighborhood is not None:
        filters.append(Property.neighborhood.ilike(f"%{neighborhood}%"))
    if min_price is not None:
        filters.append(Property.base_price_per_night >= min_price)
    if max_price is not None:
        filters.append(Property.base_price_per_night <= max_price)
    if min_bedrooms is not None:
        filters.append(Property.bedrooms >= min_bedrooms)
    if min_bathrooms is not None:
        filters.append(Property.bathrooms >= min_bathrooms)
    if min_guests is not None:
        filters.append(Property.max_guests >= min_guests)

    count_query = select(func.count()).select_from(Property).where(*filters)
    total_result = await db.execute(count_query)
    total = total_result.scalar_one()

    items_query = select(Property).where(*filters).order_by(Property.created_at.desc()).offset(skip).limit(limit)
    result = await db.execute(items_query)
    items = list(result.scalars().all())

    return PropertyListResponse(items=await to_responses(db, items, user), total=total)


@router.get(
    "/mine",
    response_model=PropertyListResponse,
    summary="List properties owned by the current user",
)
async def list_my_properties(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> PropertyListResponse:
    result = await db.execute(
        select(Property)
        .where(Property.owner_id == current_user.id, Property.is_active.is_(True))
        .order_by(Property.created_at.desc())
    )
    items = list(result.scalars().all())
    return PropertyListResponse(items=await to_responses(db, items, current_user), total=len(items))


@router.get(
    "/favorites",
    response_model=PropertyListResponse,
    summary="List the current user's favorite properties",
)
async def list_favorites(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> PropertyListResponse:
    items = await favorite_service.list_favorite_properties(db, current_user.id)
    return PropertyListResponse(
        items=[PropertyResponse.model_validate(p).model_copy(update={"is_favorite": True}) for p in items],
        total=len(items),
    )


@router.post(
    "/{property_id}/favorite",
    response_model=FavoriteToggleResponse,
    summary="Add a property to favorites, or remove it if already there",
)
async def toggle_favorite(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> FavoriteToggleResponse:
    prop = await get_active_property(db, property_id)
    is_favorite = await favorite_service.toggle_favorite(db, current_user.id, prop.id)
    return FavoriteToggleResponse(
        property_id=prop.id,
        is_favorite=is_favorite,
        message="Added to favorites" if is_favorite else "Removed from favorites",
    )


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Get a property by ID",
)
async def get_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_optional_user),
) -> PropertyResponse:
    """Retrieve a single active property. Returns 404 if missing or deleted."""
    prop = await get_active_property(db, property_id)
    [response] = await to_responses(db, [prop], user)
    return response


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Update a property",
)
async def update_property(
    property_id: uuid.UUID,
    body: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    requester: Requester = Depends(get_requester),
) -> PropertyResponse:
    """Partially update a property. Only explicitly set fields are changed."""
    prop = await get_active_property(db, property_id)
    ensure_can_manage(prop, requester, "edit")

    update_data = body.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(prop, field, value)

    db.add(prop)
    await db.flush()
    await db.refresh(prop)

    return PropertyResponse.model_validate(prop)


@router.delete(
    "/{property_id}",
    response_model=MessageResponse,
    summary="Delete a property",
)
async def delete_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    requester: Requester = Depends(get_requester),
) -> MessageResponse:
    """Soft-delete a property; it disappears from listings and calendars."""
    prop = await get_active_property(db, property_id)
    ensure_can_manage(prop, requester, "delete")

    prop.is_active = False
    await db.flush()
    logger.info("User %s deleted property %s", requester.user_id, property_id)

    return MessageResponse(message="Property deleted")
