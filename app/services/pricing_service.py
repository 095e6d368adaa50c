"""Seasonal price adjustments and stay quotes."""

import logging
import uuid
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.availability.errors import (
    InvalidRange,
    InvalidSeasonalPrice,
    MissingBasePrice,
    SeasonalPriceConflict,
    SeasonalPriceNotFound,
)
from app.availability.ledger import AvailabilityLedger
from app.models.property import Property
from app.models.seasonal_price import SeasonalPrice

logger = logging.getLogger(__name__)

MIN_PERCENTAGE = Decimal("0")
MAX_PERCENTAGE = Decimal("1000")
_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class QuoteLine:
    night: date
    rate: Decimal
    percentage: Decimal | None  # None = base rate


@dataclass(frozen=True)
class StayQuote:
    check_in: date
    check_out: date
    lines: list[QuoteLine]
    total: Decimal
    is_booked: bool
    is_fully_available: bool

    @property
    def nights(self) -> int:
        return len(self.lines)


async def list_seasonal_prices(db: AsyncSession, property_id: uuid.UUID) -> list[SeasonalPrice]:
    """Active seasonal prices of a property, ordered by start date."""
    result = await db.execute(
        select(SeasonalPrice)
        .where(SeasonalPrice.property_id == property_id, SeasonalPrice.is_active.is_(True))
        .order_by(SeasonalPrice.start_date)
    )
    return list(result.scalars().all())


async def add_seasonal_price(
    db: AsyncSession,
    prop: Property,
    start_date: date,
    end_date: date,
    percentage: Decimal,
    description: str | None = None,
) -> SeasonalPrice:
    """Create a seasonal adjustment after checking bounds and overlaps.

    Seasons are inclusive on both ends, so a season may be a single day but
    two active seasons may not share one.

    Raises:
        InvalidSeasonalPrice: If ``start_date > end_date`` or the percentage
            is outside [0, 1000].
        SeasonalPriceConflict: If the range touches an active season.
    """
    if start_date > end_date:
        raise InvalidSeasonalPrice("start_date must not be after end_date")
    if not MIN_PERCENTAGE <= percentage <= MAX_PERCENTAGE:
        raise InvalidSeasonalPrice("percentage must be between 0 and 1000")

    existing = await list_seasonal_prices(db, prop.id)
    conflicts = [str(s.id) for s in existing if start_date <= s.end_date and end_date >= s.start_date]
    if conflicts:
        raise SeasonalPriceConflict(conflicts)

    season = SeasonalPrice(
        property_id=prop.id,
        start_date=start_date,
        end_date=end_date,
        percentage=percentage,
        description=description,
    )
    db.add(season)
    await db.flush()
    await db.refresh(season)
    logger.info("Added seasonal price %s to property %s (%s%%)", season.id, prop.id, percentage)
    return season


async def deactivate_seasonal_price(db: AsyncSession, prop: Property, season_id: uuid.UUID) -> None:
    """Soft-delete a season. Deleting an already inactive season reports not found."""
    result = await db.execute(
        select(SeasonalPrice).where(
            SeasonalPrice.id == season_id,
            SeasonalPrice.property_id == prop.id,
            SeasonalPrice.is_active.is_(True),
        )
    )
    season = result.scalar_one_or_none()
    if season is None:
        raise SeasonalPriceNotFound(season_id)

    season.is_active = False
    await db.flush()
    logger.info("Deactivated seasonal price %s on property %s", season_id, prop.id)


def season_for(seasons: list[SeasonalPrice], night: date) -> SeasonalPrice | None:
    for season in seasons:
        if season.is_active and season.is_date_in_range(night):
            return season
    return None


def nightly_rate(base: Decimal, percentage: Decimal | None) -> Decimal:
    """Base rate raised by ``percentage`` percent, rounded to cents."""
    if percentage is None:
        return base.quantize(_CENTS, rounding=ROUND_HALF_UP)
    return (base * (1 + Decimal(percentage) / 100)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def build_quote(prop: Property, seasons: list[SeasonalPrice], check_in: date, check_out: date) -> StayQuote:
    """Price every night in [check_in, check_out) and check the calendar.

    Raises:
        InvalidRange: If ``check_out`` is not after ``check_in``.
        MissingBasePrice: If the property has no nightly base price.
    """
    if check_out <= check_in:
        raise InvalidRange("check_out must be after check_in")
    if prop.base_price_per_night is None:
        raise MissingBasePrice("Property has no nightly base price")

    base = Decimal(prop.base_price_per_night)
    lines: list[QuoteLine] = []
    night = check_in
    while night < check_out:
        season = season_for(seasons, night)
        percentage = Decimal(season.percentage) if season is not None else None
        lines.append(QuoteLine(night=night, rate=nightly_rate(base, percentage), percentage=percentage))
        night += timedelta(days=1)

    ledger = AvailabilityLedger.from_document(prop.availability, prop.status)
    last_night = check_out - timedelta(days=1)
    return StayQuote(
        check_in=check_in,
        check_out=check_out,
        lines=lines,
        total=sum((line.rate for line in lines), Decimal("0")),
        is_booked=ledger.is_range_booked(check_in, last_night),
        is_fully_available=ledger.is_range_fully_available(check_in, last_night),
    )
