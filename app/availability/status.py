"""Range statuses and the property aggregate status reducer."""

from collections.abc import Iterable
from typing import Protocol

DISPONIBLE = "disponible"
RESERVADO_TEMP = "reservado_temp"
OCUPADO_TEMP = "ocupado_temp"

RANGE_STATUSES: frozenset[str] = frozenset({DISPONIBLE, RESERVADO_TEMP, OCUPADO_TEMP})
BOOKED_STATUSES: frozenset[str] = frozenset({RESERVADO_TEMP, OCUPADO_TEMP})

# Alternate spellings accepted on input; stored values are always canonical.
STATUS_ALIASES: dict[str, str] = {
    "available": DISPONIBLE,
    "reservado": RESERVADO_TEMP,
    "reserved": RESERVADO_TEMP,
    "booked": RESERVADO_TEMP,
    "ocupado": OCUPADO_TEMP,
    "occupied": OCUPADO_TEMP,
}


class _HasStatus(Protocol):
    status: str


def normalize_status(value: object) -> str | None:
    """Map a raw status (canonical or alias, any case) to its canonical form.

    Returns ``None`` when the value is not a recognised status.
    """
    if not isinstance(value, str):
        return None
    key = value.strip().lower()
    if key in RANGE_STATUSES:
        return key
    return STATUS_ALIASES.get(key)


def is_booked(status: str) -> bool:
    return status in BOOKED_STATUSES


def derive_aggregate_status(
    ranges: Iterable[_HasStatus],
    previous_status: str | None,
    applied_status: str | None = None,
) -> str:
    """Compute a property's aggregate status after a ledger mutation.

    Args:
        ranges: The ranges remaining in the ledger after the mutation.
        previous_status: The aggregate status before the mutation.
        applied_status: Status of the range that was just inserted, or
            ``None`` when the mutation was a removal.

    Returns:
        - the inserted status, when a booked range was inserted;
        - ``disponible`` when nothing in ``ranges`` is booked;
        - ``previous_status`` otherwise. No booked sub-status is picked from
          the remaining ranges.
    """
    if applied_status in BOOKED_STATUSES:
        return applied_status

    if not any(r.status in BOOKED_STATUSES for r in ranges):
        return DISPONIBLE

    return previous_status or DISPONIBLE
