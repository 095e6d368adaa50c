"""Seasonal price adjustments and stay quotes."""

import uuid
from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_requester
from app.api.errors import to_http_exception
from app.api.v1.properties import ensure_can_manage, get_active_property
from app.availability.errors import AvailabilityError
from app.availability.service import Requester
from app.schemas.auth import MessageResponse
from app.schemas.seasonal_price import (
    QuoteLineResponse,
    SeasonalPriceCreate,
    SeasonalPriceListResponse,
    SeasonalPriceResponse,
    StayQuoteResponse,
)
from app.services import pricing_service

router = APIRouter(prefix="/api/v1/properties", tags=["seasonal-prices"])


@router.get(
    "/{property_id}/seasonal-prices",
    response_model=SeasonalPriceListResponse,
    summary="List a property's active seasonal prices",
)
async def list_seasonal_prices(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> SeasonalPriceListResponse:
    prop = await get_active_property(db, property_id)
    seasons = await pricing_service.list_seasonal_prices(db, prop.id)
    return SeasonalPriceListResponse(
        items=[SeasonalPriceResponse.model_validate(s) for s in seasons],
        total=len(seasons),
    )


@router.post(
    "/{property_id}/seasonal-prices",
    response_model=SeasonalPriceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a seasonal price adjustment",
)
async def create_seasonal_price(
    property_id: uuid.UUID,
    body: SeasonalPriceCreate,
    db: AsyncSession = Depends(get_db),
    requester: Requester = Depends(get_requester),
) -> SeasonalPriceResponse:
    """Add a season. Rejected with 400 if it shares a day with an active season."""
    prop = await get_active_property(db, property_id)
    ensure_can_manage(prop, requester)

    try:
        season = await pricing_service.add_seasonal_price(
            db,
            prop,
            start_date=body.start_date,
            end_date=body.end_date,
            percentage=body.percentage,
            description=body.description,
        )
    except AvailabilityError as exc:
        raise to_http_exception(exc) from exc
    return SeasonalPriceResponse.model_validate(season)


@router.delete(
    "/{property_id}/seasonal-prices/{season_id}",
    response_model=MessageResponse,
    summary="Remove a seasonal price adjustment",
)
async def delete_seasonal_price(
    property_id: uuid.UUID,
    season_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    requester: Requester = Depends(get_requester),
) -> MessageResponse:
    prop = await get_active_property(db, property_id)
    ensure_can_manage(prop, requester)

    try:
        await pricing_service.deactivate_seasonal_price(db, prop, season_id)
    except AvailabilityError as exc:
        raise to_http_exception(exc) from exc
    return MessageResponse(message="Seasonal price deleted")


@router.get(
    "/{property_id}/quote",
    response_model=StayQuoteResponse,
    summary="Price a stay night by night",
)
async def quote_stay(
    property_id: uuid.UUID,
    start_date: date = Query(..., description="Check-in day"),
    end_date: date = Query(..., description="Check-out day (not charged)"),
    db: AsyncSession = Depends(get_db),
) -> StayQuoteResponse:
    prop = await get_active_property(db, property_id)
    seasons = await pricing_service.list_seasonal_prices(db, prop.id)

    try:
        quote = pricing_service.build_quote(prop, seasons, start_date, end_date)
    except AvailabilityError as exc:
        raise to_http_exception(exc) from exc

    return StayQuoteResponse(
        property_id=prop.id,
        check_in=quote.check_in,
        check_out=quote.check_out,
        nights=quote.nights,
        lines=[QuoteLineResponse.model_validate(line) for line in quote.lines],
        total=quote.total,
        is_booked=quote.is_booked,
        is_fully_available=quote.is_fully_available,
    )
