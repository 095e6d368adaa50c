"""DateRange value type: one interval of a property's calendar."""

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from app.availability.errors import InvalidRange
from app.availability.status import BOOKED_STATUSES, DISPONIBLE, normalize_status

# Namespace for ids derived from stored ranges that were saved without one.
_STORED_RANGE_NAMESPACE = uuid.UUID("6f1c2a4e-8b3d-5e7f-9a0b-c1d2e3f4a5b6")


def stored_range_id(doc: dict[str, Any]) -> str:
    """Deterministic id for a stored range that carries neither ``id`` nor ``_id``.

    The same document always yields the same id, so it can be read back and
    removed by the id a previous read returned.
    """
    key = "|".join(str(doc.get(name, "")) for name in ("startDate", "endDate", "status"))
    return str(uuid.uuid5(_STORED_RANGE_NAMESPACE, key))


def parse_instant(value: Any, field_name: str) -> datetime:
    """Parse a calendar instant into an aware UTC datetime.

    Accepts ``datetime``, ``date`` (midnight) and ISO-8601 strings, including
    the ``Z`` suffix browsers send and bare ``YYYY-MM-DD`` dates. Naive values
    are taken as UTC.

    Raises:
        InvalidRange: If the value is missing or cannot be parsed.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            raise InvalidRange(f"{field_name} is not a valid date: {value!r}") from None
    elif value is None or isinstance(value, str):
        raise InvalidRange(f"{field_name} is required")
    else:
        raise InvalidRange(f"{field_name} is not a valid date: {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _coerce_deposit(value: Any) -> Decimal:
    """Non-negative decimal; anything invalid or missing becomes 0."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        deposit = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    if not deposit.is_finite() or deposit < 0:
        return Decimal("0")
    return deposit


def _coerce_guests(value: Any) -> int:
    """Positive integer; anything invalid or missing becomes 1."""
    if value is None or isinstance(value, bool):
        return 1
    try:
        guests = int(value)
    except (TypeError, ValueError):
        try:
            guests = int(float(str(value)))
        except (TypeError, ValueError, OverflowError):
            return 1
    return guests if guests >= 1 else 1


@dataclass(frozen=True)
class DateRange:
    """A validated [start_date, end_date] interval carrying a booking status.

    Instances are immutable; an edit is a removal plus a new insertion.
    Build them through :meth:`create` (new input) or :meth:`from_document`
    (stored data), never directly from untrusted input.
    """

    id: str
    start_date: datetime
    end_date: datetime
    status: str
    client_name: str = ""
    deposit: Decimal = Decimal("0")
    guests: int = 1
    notes: str | None = None
    # Identifier assigned by an older storage layer (``_id``); matched on removal.
    storage_id: str | None = field(default=None, compare=False)

    @classmethod
    def create(
        cls,
        start_date: Any,
        end_date: Any,
        status: Any,
        *,
        client_name: Any = None,
        deposit: Any = None,
        guests: Any = None,
        notes: Any = None,
        range_id: str | None = None,
    ) -> "DateRange":
        """Validate raw input and build a new range with a fresh id.

        Raises:
            InvalidRange: If a date is missing or unparseable, if
                ``start_date >= end_date`` or if ``status`` is unknown.
        """
        start = parse_instant(start_date, "startDate")
        end = parse_instant(end_date, "endDate")
        if start >= end:
            raise InvalidRange("startDate must be before endDate")

        canonical = normalize_status(status)
        if canonical is None:
            raise InvalidRange(f"Unknown status: {status!r}")

        return cls(
            id=range_id or str(uuid.uuid4()),
            start_date=start,
            end_date=end,
            status=canonical,
            client_name=str(client_name).strip() if client_name else "",
            deposit=_coerce_deposit(deposit),
            guests=_coerce_guests(guests),
            notes=str(notes) if notes else None,
        )

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "DateRange":
        """Rebuild a range from its stored JSON shape.

        Stored entries written before ids were assigned only carry ``_id``;
        that value doubles as the logical id. Entries with neither get a
        derived id that is the same on every load.
        """
        storage_id = doc.get("_id")
        range_id = doc.get("id") or storage_id or stored_range_id(doc)
        built = cls.create(
            doc.get("startDate"),
            doc.get("endDate"),
            doc.get("status") or DISPONIBLE,
            client_name=doc.get("clientName"),
            deposit=doc.get("deposit"),
            guests=doc.get("guests", doc.get("availableGuests")),
            notes=doc.get("notes"),
            range_id=str(range_id),
        )
        if storage_id is None:
            return built
        return replace(built, storage_id=str(storage_id))

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "id": self.id,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "status": self.status,
            "clientName": self.client_name,
            "deposit": str(self.deposit),
            "guests": self.guests,
            "notes": self.notes,
        }
        if self.storage_id is not None:
            doc["_id"] = self.storage_id
        return doc

    @property
    def is_booked(self) -> bool:
        return self.status in BOOKED_STATUSES

    def overlaps(self, other: "DateRange") -> bool:
        """Inclusive on both ends: ranges sharing a boundary instant overlap."""
        return self.start_date <= other.end_date and self.end_date >= other.start_date

    def covers_day(self, day: date) -> bool:
        """True if ``day`` falls between the start day and end day inclusive."""
        return self.start_date.date() <= day <= self.end_date.date()

    def matches(self, range_id: str) -> bool:
        return range_id == self.id or (self.storage_id is not None and range_id == self.storage_id)
