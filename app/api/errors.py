"""Translation of domain errors into HTTP responses."""

from fastapi import HTTPException, status

from app.availability.errors import (
    AvailabilityError,
    CorruptAvailability,
    Forbidden,
    InvalidRange,
    InvalidSeasonalPrice,
    MissingBasePrice,
    OverlapConflict,
    PropertyNotFound,
    RangeNotFound,
    SeasonalPriceConflict,
    SeasonalPriceNotFound,
)
from app.schemas.availability import ConflictDetail, DateRangeResponse

_STATUS_CODES: dict[type[AvailabilityError], int] = {
    InvalidRange: status.HTTP_400_BAD_REQUEST,
    OverlapConflict: status.HTTP_400_BAD_REQUEST,
    InvalidSeasonalPrice: status.HTTP_400_BAD_REQUEST,
    SeasonalPriceConflict: status.HTTP_400_BAD_REQUEST,
    MissingBasePrice: status.HTTP_400_BAD_REQUEST,
    Forbidden: status.HTTP_403_FORBIDDEN,
    PropertyNotFound: status.HTTP_404_NOT_FOUND,
    RangeNotFound: status.HTTP_404_NOT_FOUND,
    SeasonalPriceNotFound: status.HTTP_404_NOT_FOUND,
    CorruptAvailability: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_exception(exc: AvailabilityError) -> HTTPException:
    """Map a domain error to the ``HTTPException`` the API returns for it.

    Overlap errors carry the conflicting ranges so the caller can explain the
    rejection.
    """
    status_code = _STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, OverlapConflict):
        detail = ConflictDetail(
            message=exc.message,
            conflicts=[DateRangeResponse.from_range(r) for r in exc.conflicts],
        )
        return HTTPException(status_code=status_code, detail=detail.model_dump(mode="json", by_alias=True))

    if isinstance(exc, CorruptAvailability):
        return HTTPException(status_code=status_code, detail="Stored availability data is invalid")

    if isinstance(exc, SeasonalPriceConflict):
        return HTTPException(
            status_code=status_code,
            detail={"message": exc.message, "conflicts": exc.conflicting_ids},
        )

    return HTTPException(status_code=status_code, detail=exc.message)
