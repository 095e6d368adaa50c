"""Temporary-rental availability API router.

Reads are public. Insert, replace and delete need the property owner or an
admin. Range errors are 400, authorization failures 403 and missing
properties or ranges 404.
"""

import uuid

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_availability_service, get_requester
from app.api.errors import to_http_exception
from app.availability.errors import AvailabilityError
from app.availability.service import AvailabilityService, Requester
from app.schemas.availability import (
    AvailabilityResponse,
    DateRangeInput,
    RangeCheckResponse,
)
from app.schemas.property import PropertyResponse

router = APIRouter(prefix="/api/v1/properties", tags=["availability"])


@router.get(
    "/{property_id}/availability",
    response_model=AvailabilityResponse,
    summary="Get a property's availability ranges and aggregate status",
)
async def get_availability(
    property_id: uuid.UUID,
    service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilityResponse:
    try:
        snapshot = await service.get_availability(property_id)
    except AvailabilityError as exc:
        raise to_http_exception(exc) from exc
    return AvailabilityResponse.from_snapshot(snapshot)


@router.get(
    "/{property_id}/availability/check",
    response_model=RangeCheckResponse,
    summary="Check whether a stay is booked or fully available",
)
async def check_availability(
    property_id: uuid.UUID,
    start_date: str = Query(..., description="First day of the stay (ISO-8601)"),
    end_date: str = Query(..., description="Last day of the stay, inclusive (ISO-8601)"),
    service: AvailabilityService = Depends(get_availability_service),
) -> RangeCheckResponse:
    try:
        check = await service.check_range(property_id, start_date, end_date)
    except AvailabilityError as exc:
        raise to_http_exception(exc) from exc
    return RangeCheckResponse.from_check(check)


async def _add_range(
    property_id: uuid.UUID,
    body: DateRangeInput,
    service: AvailabilityService,
    requester: Requester,
) -> PropertyResponse:
    try:
        snapshot = await service.add_range(property_id, requester, body.to_range_input())
    except AvailabilityError as exc:
        raise to_http_exception(exc) from exc
    return PropertyResponse.model_validate(snapshot.property)


@router.put(
    "/{property_id}/availability",
    response_model=PropertyResponse,
    summary="Add a date range to a property's calendar",
)
async def put_availability(
    property_id: uuid.UUID,
    body: DateRangeInput,
    service: AvailabilityService = Depends(get_availability_service),
    requester: Requester = Depends(get_requester),
) -> PropertyResponse:
    """Insert a range. Rejected with 400 if it touches any existing range."""
    return await _add_range(property_id, body, service, requester)


@router.patch(
    "/{property_id}/availability",
    response_model=PropertyResponse,
    summary="Add a date range to a property's calendar",
)
async def patch_availability(
    property_id: uuid.UUID,
    body: DateRangeInput,
    service: AvailabilityService = Depends(get_availability_service),
    requester: Requester = Depends(get_requester),
) -> PropertyResponse:
    """Same as ``PUT``; kept for clients that send ``PATCH``."""
    return await _add_range(property_id, body, service, requester)


@router.put(
    "/{property_id}/availability/{range_id}",
    response_model=PropertyResponse,
    summary="Replace one date range with another",
)
async def replace_availability_range(
    property_id: uuid.UUID,
    range_id: str,
    body: DateRangeInput,
    service: AvailabilityService = Depends(get_availability_service),
    requester: Requester = Depends(get_requester),
) -> PropertyResponse:
    """Edit a range by removing it and inserting the replacement in one write."""
    try:
        snapshot = await service.replace_range(property_id, range_id, requester, body.to_range_input())
    except AvailabilityError as exc:
        raise to_http_exception(exc) from exc
    return PropertyResponse.model_validate(snapshot.property)


@router.delete(
    "/{property_id}/availability/{range_id}",
    response_model=PropertyResponse,
    summary="Remove a date range",
)
async def delete_availability_range(
    property_id: uuid.UUID,
    range_id: str,
    service: AvailabilityService = Depends(get_availability_service),
    requester: Requester = Depends(get_requester),
) -> PropertyResponse:
    """Remove a range by id. Repeating the call reports 404."""
    try:
        snapshot = await service.remove_range(property_id, range_id, requester)
    except AvailabilityError as exc:
        raise to_http_exception(exc) from exc
    return PropertyResponse.model_validate(snapshot.property)
