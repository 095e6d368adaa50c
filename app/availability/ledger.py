"""Availability ledger: the ordered range set owned by one property.

The ledger enforces a single invariant: no two ranges overlap (inclusive
boundaries), whatever their status. It also tracks the property's aggregate
status, recomputed by :func:`derive_aggregate_status` on every mutation.
"""

from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Any

from app.availability.date_range import DateRange
from app.availability.errors import CorruptAvailability, InvalidRange, OverlapConflict, RangeNotFound
from app.availability.status import DISPONIBLE, derive_aggregate_status


def _as_day(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def _days(start: date, end: date) -> Iterable[date]:
    day = start
    while day <= end:
        yield day
        day += timedelta(days=1)


class AvailabilityLedger:
    """Mutable holder of a property's date ranges and aggregate status.

    Ranges keep insertion order. Mutations either succeed completely or raise
    and leave the ledger untouched.
    """

    def __init__(self, ranges: Iterable[DateRange] = (), status: str | None = None) -> None:
        self._ranges: list[DateRange] = list(ranges)
        self._status = status or DISPONIBLE

    @classmethod
    def from_document(cls, availability: list[dict[str, Any]] | None, status: str | None) -> "AvailabilityLedger":
        """Build a ledger from a property's stored ``availability`` array and ``status``.

        Raises:
            CorruptAvailability: If a stored entry is not a valid range.
        """
        ranges = []
        for index, doc in enumerate(availability or []):
            if not isinstance(doc, dict):
                raise CorruptAvailability(index, f"expected an object, got {type(doc).__name__}")
            try:
                ranges.append(DateRange.from_document(doc))
            except InvalidRange as exc:
                raise CorruptAvailability(index, exc.message) from exc
        return cls(ranges, status)

    def to_document(self) -> list[dict[str, Any]]:
        return [r.to_document() for r in self._ranges]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def status(self) -> str:
        """The aggregate status after the last mutation."""
        return self._status

    def list_ranges(self) -> list[DateRange]:
        """Return a snapshot of the ranges in insertion order."""
        return list(self._ranges)

    def __len__(self) -> int:
        return len(self._ranges)

    def find(self, range_id: str) -> DateRange | None:
        for r in self._ranges:
            if r.matches(range_id):
                return r
        return None

    def conflicts_with(self, candidate: DateRange) -> list[DateRange]:
        """Existing ranges the candidate overlaps, regardless of their status."""
        return [r for r in self._ranges if r.overlaps(candidate)]

    def derive_aggregate_status(self) -> str:
        """Recompute the aggregate status from the current range set."""
        return derive_aggregate_status(self._ranges, self._status)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def insert(self, candidate: DateRange) -> list[DateRange]:
        """Append a range after checking it against every existing range.

        Raises:
            OverlapConflict: If the candidate touches or crosses any range.
        """
        conflicts = self.conflicts_with(candidate)
        if conflicts:
            raise OverlapConflict(conflicts)

        self._ranges.append(candidate)
        self._status = derive_aggregate_status(self._ranges, self._status, candidate.status)
        return self.list_ranges()

    def remove(self, range_id: str) -> list[DateRange]:
        """Remove the range whose id (or storage id) matches ``range_id``.

        Raises:
            RangeNotFound: If no range matches.
        """
        target = self.find(range_id)
        if target is None:
            raise RangeNotFound(range_id)

        self._ranges = [r for r in self._ranges if r is not target]
        self._status = derive_aggregate_status(self._ranges, self._status)
        return self.list_ranges()

    def replace(self, range_id: str, candidate: DateRange) -> list[DateRange]:
        """Swap one range for another; on failure the ledger is unchanged."""
        trial = AvailabilityLedger(self._ranges, self._status)
        trial.remove(range_id)
        trial.insert(candidate)

        self._ranges = trial._ranges
        self._status = trial._status
        return self.list_ranges()

    # ------------------------------------------------------------------
    # Calendar queries (day granularity)
    # ------------------------------------------------------------------

    def is_date_booked(self, day: date | datetime) -> bool:
        d = _as_day(day)
        return any(r.is_booked and r.covers_day(d) for r in self._ranges)

    def is_date_available(self, day: date | datetime) -> bool:
        d = _as_day(day)
        return any(r.status == DISPONIBLE and r.covers_day(d) for r in self._ranges)

    def is_range_booked(self, start: date | datetime, end: date | datetime) -> bool:
        """True if any day from ``start`` through ``end`` is booked."""
        return any(self.is_date_booked(d) for d in _days(_as_day(start), _as_day(end)))

    def is_range_fully_available(self, start: date | datetime, end: date | datetime) -> bool:
        """True if every day from ``start`` through ``end`` is marked ``disponible``.

        An empty ledger declares nothing available.
        """
        if not self._ranges:
            return False
        return all(self.is_date_available(d) for d in _days(_as_day(start), _as_day(end)))
