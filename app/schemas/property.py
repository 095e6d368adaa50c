"""Pydantic v2 request/response schemas for property endpoints."""

import json
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.availability.date_range import DateRange
from app.schemas.availability import DateRangeResponse

_PROPERTY_TYPES = "^(casa|departamento|ph|cabana|quinta|local|oficina|terreno)$"
_TRANSACTION_TYPES = "^(venta|alquiler|alquiler_temporario)$"


def normalize_list_field(value: Any) -> list[str] | None:
    """Normalise list-ish input to ``list[str]``.

    Accepts a list, a JSON-encoded list, or a comma-separated string. Blank
    entries are dropped; ``None`` stays ``None``.
    """
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        try:
            decoded = json.loads(text)
        except ValueError:
            decoded = text.split(",")
        value = decoded if isinstance(decoded, list) else [decoded]
    if not isinstance(value, (list, tuple)):
        raise ValueError("must be a list or a string")
    return [str(item).strip() for item in value if str(item).strip()]


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PropertyCreate(BaseModel):
    """Schema for creating a new property."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    address: str | None = Field(None, max_length=255)
    neighborhood: str | None = Field(None, max_length=255)
    locality: str | None = Field(None, max_length=255)
    province: str | None = Field(None, max_length=255)
    property_type: str = Field(..., pattern=_PROPERTY_TYPES)
    transaction_type: str = Field("alquiler_temporario", pattern=_TRANSACTION_TYPES)
    bedrooms: int | None = Field(None, ge=0)
    bathrooms: int | None = Field(None, ge=0)
    max_guests: int | None = Field(None, ge=1)
    base_price_per_night: Decimal | None = Field(None, ge=0)
    amenities: list[str] | None = None
    rules: list[str] | None = None

    @field_validator("amenities", "rules", mode="before")
    @classmethod
    def _normalize_lists(cls, value: Any) -> list[str] | None:
        return normalize_list_field(value)


class PropertyUpdate(BaseModel):
    """Schema for partially updating a property. All fields optional.

    Availability and the aggregate status are not editable here; they change
    only through the availability endpoints.
    """

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    address: str | None = Field(None, max_length=255)
    neighborhood: str | None = Field(None, max_length=255)
    locality: str | None = Field(None, max_length=255)
    province: str | None = Field(None, max_length=255)
    property_type: str | None = Field(None, pattern=_PROPERTY_TYPES)
    transaction_type: str | None = Field(None, pattern=_TRANSACTION_TYPES)
    bedrooms: int | None = Field(None, ge=0)
    bathrooms: int | None = Field(None, ge=0)
    max_guests: int | None = Field(None, ge=1)
    base_price_per_night: Decimal | None = Field(None, ge=0)
    amenities: list[str] | None = None
    rules: list[str] | None = None

    @field_validator("amenities", "rules", mode="before")
    @classmethod
    def _normalize_lists(cls, value: Any) -> list[str] | None:
        return normalize_list_field(value)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class PropertyResponse(BaseModel):
    """Public property information returned from the API."""

    id: uuid.UUID
    owner_id: uuid.UUID
    title: str
    description: str | None = None
    address: str | None = None
    neighborhood: str | None = None
    locality: str | None = None
    province: str | None = None
    property_type: str
    transaction_type: str
    bedrooms: int | None = None
    bathrooms: int | None = None
    max_guests: int | None = None
    base_price_per_night: Decimal | None = None
    amenities: list | None = None
    rules: list | None = None
    availability: list[DateRangeResponse] = Field(default_factory=list)
    status: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    is_favorite: bool = False

    model_config = ConfigDict(from_attributes=True)

    @field_validator("availability", mode="before")
    @classmethod
    def _ranges_from_documents(cls, value: Any) -> list[DateRangeResponse]:
        return [DateRangeResponse.from_range(DateRange.from_document(doc)) for doc in value or []]


class PropertyListResponse(BaseModel):
    """Paginated list of properties."""

    items: list[PropertyResponse]
    total: int


class FavoriteToggleResponse(BaseModel):
    """Result of toggling a property in the caller's favorites."""

    property_id: uuid.UUID
    is_favorite: bool
    message: str
