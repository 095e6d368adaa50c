"""Pydantic v2 request/response schemas for availability endpoints.

Field names on the wire are camelCase (``startDate``, ``clientName``, ...),
matching the stored range documents.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.availability.date_range import DateRange
from app.availability.service import AvailabilitySnapshot, RangeCheck

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class DateRangeInput(BaseModel):
    """Body of an insert or replace request.

    Everything is optional and untyped at this layer: missing or malformed
    dates and unknown statuses, including non-string values, are range errors
    (400), not request-shape errors, and ``deposit``/``guests`` are coerced
    rather than rejected.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    start_date: Any = None
    end_date: Any = None
    status: Any = None
    client_name: str | None = None
    deposit: Any = None
    guests: Any = None
    notes: str | None = None

    def to_range_input(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class DateRangeResponse(BaseModel):
    """One range of a property's calendar."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    start_date: datetime
    end_date: datetime
    status: str
    client_name: str = ""
    deposit: Decimal = Decimal("0")
    guests: int = 1
    notes: str | None = None

    @classmethod
    def from_range(cls, r: DateRange) -> "DateRangeResponse":
        return cls(
            id=r.id,
            start_date=r.start_date,
            end_date=r.end_date,
            status=r.status,
            client_name=r.client_name,
            deposit=r.deposit,
            guests=r.guests,
            notes=r.notes,
        )


class AvailabilityResponse(BaseModel):
    """A property's ranges and aggregate status."""

    property_id: uuid.UUID
    status: str
    ranges: list[DateRangeResponse]

    @classmethod
    def from_snapshot(cls, snapshot: AvailabilitySnapshot) -> "AvailabilityResponse":
        return cls(
            property_id=snapshot.property_id,
            status=snapshot.status,
            ranges=[DateRangeResponse.from_range(r) for r in snapshot.ranges],
        )


class ConflictDetail(BaseModel):
    """Shape of ``detail`` in a 400 overlap response."""

    message: str
    conflicts: list[DateRangeResponse] = Field(default_factory=list)


class RangeCheckResponse(BaseModel):
    """Day-level calendar check for a requested stay."""

    start_date: date
    end_date: date
    is_booked: bool
    is_fully_available: bool

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_check(cls, check: RangeCheck) -> "RangeCheckResponse":
        return cls.model_validate(check)
