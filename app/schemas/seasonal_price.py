"""Pydantic v2 request/response schemas for seasonal prices and stay quotes."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class SeasonalPriceCreate(BaseModel):
    """Schema for adding a seasonal adjustment to a property."""

    start_date: date
    end_date: date
    percentage: Decimal = Field(..., ge=0, le=1000)
    description: str | None = Field(None, max_length=255)

    @model_validator(mode="after")
    def check_dates(self) -> "SeasonalPriceCreate":
        """Seasons are inclusive, so a single-day season is allowed."""
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class SeasonalPriceResponse(BaseModel):
    id: uuid.UUID
    property_id: uuid.UUID
    start_date: date
    end_date: date
    percentage: Decimal
    description: str | None = None
    is_active: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SeasonalPriceListResponse(BaseModel):
    items: list[SeasonalPriceResponse]
    total: int


class QuoteLineResponse(BaseModel):
    night: date
    rate: Decimal
    percentage: Decimal | None = None

    model_config = ConfigDict(from_attributes=True)


class StayQuoteResponse(BaseModel):
    """Per-night pricing for a stay plus the calendar check for it."""

    property_id: uuid.UUID
    check_in: date
    check_out: date
    nights: int
    lines: list[QuoteLineResponse]
    total: Decimal
    is_booked: bool
    is_fully_available: bool
