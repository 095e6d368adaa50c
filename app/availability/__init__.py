"""Temporary-rental availability: date ranges, the per-property ledger and its service."""

from app.availability.date_range import DateRange
from app.availability.errors import (
    AvailabilityError,
    CorruptAvailability,
    Forbidden,
    InvalidRange,
    OverlapConflict,
    PropertyNotFound,
    RangeNotFound,
)
from app.availability.ledger import AvailabilityLedger
from app.availability.service import AvailabilityService, AvailabilitySnapshot, RangeCheck, Requester
from app.availability.status import (
    BOOKED_STATUSES,
    DISPONIBLE,
    OCUPADO_TEMP,
    RANGE_STATUSES,
    RESERVADO_TEMP,
    derive_aggregate_status,
    normalize_status,
)

__all__ = [
    "AvailabilityError",
    "AvailabilityLedger",
    "AvailabilityService",
    "AvailabilitySnapshot",
    "BOOKED_STATUSES",
    "CorruptAvailability",
    "DISPONIBLE",
    "DateRange",
    "Forbidden",
    "InvalidRange",
    "OCUPADO_TEMP",
    "OverlapConflict",
    "PropertyNotFound",
    "RANGE_STATUSES",
    "RESERVADO_TEMP",
    "RangeCheck",
    "RangeNotFound",
    "Requester",
    "derive_aggregate_status",
    "normalize_status",
]
