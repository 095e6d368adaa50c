"""Domain errors raised by the availability ledger and service.

Routers translate these into HTTP responses. All but :class:`CorruptAvailability`
are caller-recoverable conditions and map to 4xx; corrupt stored data is a
server fault and maps to 500.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.availability.date_range import DateRange


class AvailabilityError(Exception):
    """Base class for availability and seasonal pricing errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidRange(AvailabilityError):
    """Malformed dates, start >= end, unknown status or a policy violation."""


class OverlapConflict(AvailabilityError):
    """A candidate range touches or crosses one or more existing ranges."""

    def __init__(self, conflicts: list[DateRange]) -> None:
        ids = ", ".join(c.id for c in conflicts)
        super().__init__(f"Date range overlaps existing range(s): {ids}")
        self.conflicts = conflicts


class CorruptAvailability(AvailabilityError):
    """A stored range cannot be rebuilt, so the property's calendar cannot be read."""

    def __init__(self, index: int, reason: str) -> None:
        super().__init__(f"Stored availability range #{index} is invalid: {reason}")
        self.index = index


class RangeNotFound(AvailabilityError):
    def __init__(self, range_id: str) -> None:
        super().__init__(f"Date range {range_id} not found")
        self.range_id = range_id


class Forbidden(AvailabilityError):
    """The requester is neither the property owner nor an admin."""


class PropertyNotFound(AvailabilityError):
    def __init__(self, property_id: object) -> None:
        super().__init__("Property not found")
        self.property_id = property_id


class InvalidSeasonalPrice(AvailabilityError):
    pass


class SeasonalPriceConflict(AvailabilityError):
    def __init__(self, conflicting_ids: list[str]) -> None:
        super().__init__("Seasonal price ranges cannot overlap")
        self.conflicting_ids = conflicting_ids


class SeasonalPriceNotFound(AvailabilityError):
    def __init__(self, season_id: object) -> None:
        super().__init__("Seasonal price not found")
        self.season_id = season_id


class MissingBasePrice(AvailabilityError):
    """A stay cannot be quoted because the property has no nightly base price."""
