"""Availability service: authorization, locking and persistence around the ledger.

Every mutation runs load -> authorize -> validate -> mutate -> persist inside
the property's lock, and persists the range list and the aggregate status in
a single write.
"""

import logging
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from app.availability.date_range import DateRange, parse_instant
from app.availability.errors import (
    AvailabilityError,
    CorruptAvailability,
    Forbidden,
    InvalidRange,
    OverlapConflict,
    PropertyNotFound,
)
from app.availability.ledger import AvailabilityLedger
from app.availability.locks import PropertyLockRegistry, property_locks
from app.availability.store import PropertyStore
from app.config import settings
from app.models.property import Property

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Requester:
    """Who is asking, passed explicitly with every mutation."""

    user_id: uuid.UUID
    is_admin: bool = False

    @classmethod
    def from_user(cls, user: Any) -> "Requester":
        return cls(user_id=user.id, is_admin=bool(user.is_admin))


@dataclass(frozen=True)
class AvailabilitySnapshot:
    """A property's ranges and aggregate status at one point in time."""

    property_id: uuid.UUID
    ranges: list[DateRange]
    status: str
    property: Property | None = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class RangeCheck:
    """Day-level calendar check for a requested stay."""

    start_date: date
    end_date: date
    is_booked: bool
    is_fully_available: bool


def can_manage(prop: Property, requester: Requester) -> bool:
    """Only the owner or an admin may change a property."""
    return requester.is_admin or prop.owner_id == requester.user_id


def build_range(range_input: Mapping[str, Any], *, require_client_name: bool) -> DateRange:
    """Validate caller input into a new ``DateRange``.

    Keys follow the stored JSON shape: ``startDate``, ``endDate``, ``status``,
    ``clientName``, ``deposit``, ``guests``, ``notes``.

    Raises:
        InvalidRange: On bad dates or status, or when a booked range has no
            client name and the policy requires one.
    """
    candidate = DateRange.create(
        range_input.get("startDate"),
        range_input.get("endDate"),
        range_input.get("status"),
        client_name=range_input.get("clientName"),
        deposit=range_input.get("deposit"),
        guests=range_input.get("guests"),
        notes=range_input.get("notes"),
    )
    if require_client_name and candidate.is_booked and not candidate.client_name:
        raise InvalidRange("clientName is required for reserved or occupied ranges")
    return candidate


class AvailabilityService:
    """Boundary between the availability ledger and the outside world."""

    def __init__(
        self,
        store: PropertyStore,
        *,
        locks: PropertyLockRegistry | None = None,
        require_client_name: bool | None = None,
    ) -> None:
        self.store = store
        self.locks = locks if locks is not None else property_locks
        self.require_client_name = (
            settings.availability_require_client_name if require_client_name is None else require_client_name
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_availability(self, property_id: uuid.UUID) -> AvailabilitySnapshot:
        """Return the stored ranges and aggregate status of an active property.

        Raises:
            PropertyNotFound: If the property is missing or soft-deleted.
        """
        prop = await self._load_active(property_id)
        ledger = self._ledger(prop)
        return AvailabilitySnapshot(prop.id, ledger.list_ranges(), ledger.status, prop)

    async def check_range(self, property_id: uuid.UUID, start: Any, end: Any) -> RangeCheck:
        """Check whether the days from ``start`` through ``end`` are booked or fully available."""
        start_day = parse_instant(start, "startDate").date()
        end_day = parse_instant(end, "endDate").date()
        if start_day > end_day:
            raise InvalidRange("startDate must not be after endDate")

        prop = await self._load_active(property_id)
        ledger = self._ledger(prop)
        return RangeCheck(
            start_date=start_day,
            end_date=end_day,
            is_booked=ledger.is_range_booked(start_day, end_day),
            is_fully_available=ledger.is_range_fully_available(start_day, end_day),
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add_range(
        self,
        property_id: uuid.UUID,
        requester: Requester,
        range_input: Mapping[str, Any],
    ) -> AvailabilitySnapshot:
        """Insert a new range and persist the recomputed aggregate status.

        Raises:
            PropertyNotFound, Forbidden, InvalidRange, OverlapConflict
        """
        async with self.locks.hold(property_id):
            prop = await self._load_active(property_id, for_update=True)
            self._authorize(prop, requester)
            candidate = build_range(range_input, require_client_name=self.require_client_name)

            ledger = self._ledger(prop)
            try:
                ledger.insert(candidate)
            except OverlapConflict as exc:
                logger.info(
                    "Rejected range %s..%s on property %s: overlaps %s",
                    candidate.start_date.isoformat(),
                    candidate.end_date.isoformat(),
                    property_id,
                    [c.id for c in exc.conflicts],
                )
                raise

            snapshot = await self._persist(prop.id, ledger)
            logger.info(
                "Added range %s (%s) to property %s; status=%s",
                candidate.id,
                candidate.status,
                property_id,
                snapshot.status,
            )
            return snapshot

    async def remove_range(
        self,
        property_id: uuid.UUID,
        range_id: str,
        requester: Requester,
    ) -> AvailabilitySnapshot:
        """Remove a range by its id or storage id.

        Raises:
            PropertyNotFound, Forbidden, RangeNotFound
        """
        async with self.locks.hold(property_id):
            prop = await self._load_active(property_id, for_update=True)
            self._authorize(prop, requester)

            ledger = self._ledger(prop)
            ledger.remove(range_id)

            snapshot = await self._persist(prop.id, ledger)
            logger.info("Removed range %s from property %s; status=%s", range_id, property_id, snapshot.status)
            return snapshot

    async def replace_range(
        self,
        property_id: uuid.UUID,
        range_id: str,
        requester: Requester,
        range_input: Mapping[str, Any],
    ) -> AvailabilitySnapshot:
        """Edit a range as removal plus insertion, persisted as one write.

        The replacement is checked against every range except the one it
        replaces. If it is rejected nothing is written.
        """
        async with self.locks.hold(property_id):
            prop = await self._load_active(property_id, for_update=True)
            self._authorize(prop, requester)
            candidate = build_range(range_input, require_client_name=self.require_client_name)

            ledger = self._ledger(prop)
            ledger.replace(range_id, candidate)

            snapshot = await self._persist(prop.id, ledger)
            logger.info(
                "Replaced range %s with %s on property %s; status=%s",
                range_id,
                candidate.id,
                property_id,
                snapshot.status,
            )
            return snapshot

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _load_active(self, property_id: uuid.UUID, *, for_update: bool = False) -> Property:
        prop = await self.store.load_property(property_id, for_update=for_update)
        if prop is None or not prop.is_active:
            raise PropertyNotFound(property_id)
        return prop

    @staticmethod
    def _ledger(prop: Property) -> AvailabilityLedger:
        try:
            return AvailabilityLedger.from_document(prop.availability, prop.status)
        except CorruptAvailability as exc:
            logger.error("Property %s has corrupt availability data: %s", prop.id, exc.message)
            raise

    @staticmethod
    def _authorize(prop: Property, requester: Requester) -> None:
        if can_manage(prop, requester):
            return
        logger.warning("User %s may not change availability of property %s", requester.user_id, prop.id)
        raise Forbidden("You do not have permission to change this property's availability")

    async def _persist(self, property_id: uuid.UUID, ledger: AvailabilityLedger) -> AvailabilitySnapshot:
        update = {"availability": ledger.to_document(), "status": ledger.status}
        try:
            saved = await self.store.save_property(property_id, update)
        except AvailabilityError:
            raise
        except Exception:
            logger.exception("Failed to persist availability for property %s", property_id)
            raise
        return AvailabilitySnapshot(property_id, ledger.list_ranges(), ledger.status, saved)
