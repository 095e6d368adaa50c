"""Unit tests for nightly rates and stay quotes."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.availability.errors import InvalidRange, MissingBasePrice
from app.services.pricing_service import build_quote, nightly_rate, season_for


def season(start: date, end: date, percentage: str, is_active: bool = True) -> SimpleNamespace:
    return SimpleNamespace(
        start_date=start,
        end_date=end,
        percentage=Decimal(percentage),
        is_active=is_active,
        is_date_in_range=lambda day: start <= day <= end,
    )


def prop(base: str | None = "100.00", availability: list | None = None) -> SimpleNamespace:
    return SimpleNamespace(
        base_price_per_night=Decimal(base) if base is not None else None,
        availability=availability or [],
        status="disponible",
    )


class TestNightlyRate:
    def test_base_rate_without_season(self):
        assert nightly_rate(Decimal("100"), None) == Decimal("100.00")

    def test_percentage_increase(self):
        assert nightly_rate(Decimal("100"), Decimal("25")) == Decimal("125.00")

    def test_zero_percent_keeps_base(self):
        assert nightly_rate(Decimal("80"), Decimal("0")) == Decimal("80.00")

    def test_rounds_half_up_to_cents(self):
        assert nightly_rate(Decimal("33.33"), Decimal("10")) == Decimal("36.66")
        assert nightly_rate(Decimal("0.05"), Decimal("10")) == Decimal("0.06")


class TestSeasonFor:
    def test_inclusive_bounds(self):
        seasons = [season(date(2025, 1, 1), date(2025, 1, 31), "20")]
        assert season_for(seasons, date(2025, 1, 1)) is seasons[0]
        assert season_for(seasons, date(2025, 1, 31)) is seasons[0]
        assert season_for(seasons, date(2025, 2, 1)) is None

    def test_inactive_season_ignored(self):
        seasons = [season(date(2025, 1, 1), date(2025, 1, 31), "20", is_active=False)]
        assert season_for(seasons, date(2025, 1, 10)) is None


class TestBuildQuote:
    def test_checkout_night_is_not_charged(self):
        quote = build_quote(prop(), [], date(2025, 1, 1), date(2025, 1, 3))
        assert quote.nights == 2
        assert [line.night for line in quote.lines] == [date(2025, 1, 1), date(2025, 1, 2)]
        assert quote.total == Decimal("200.00")

    def test_season_applies_to_its_nights_only(self):
        seasons = [season(date(2025, 1, 2), date(2025, 1, 2), "50")]
        quote = build_quote(prop(), seasons, date(2025, 1, 1), date(2025, 1, 4))
        assert [line.rate for line in quote.lines] == [Decimal("100.00"), Decimal("150.00"), Decimal("100.00")]
        assert quote.lines[1].percentage == Decimal("50")
        assert quote.total == Decimal("350.00")

    def test_booked_night_is_reported(self):
        availability = [
            {"id": "r1", "startDate": "2025-01-02", "endDate": "2025-01-03", "status": "ocupado_temp"},
        ]
        quote = build_quote(prop(availability=availability), [], date(2025, 1, 1), date(2025, 1, 3))
        assert quote.is_booked is True
        assert quote.is_fully_available is False

    def test_booking_starting_on_checkout_day_is_ignored(self):
        availability = [
            {"id": "r1", "startDate": "2025-01-03", "endDate": "2025-01-05", "status": "reservado_temp"},
        ]
        quote = build_quote(prop(availability=availability), [], date(2025, 1, 1), date(2025, 1, 3))
        assert quote.is_booked is False

    @pytest.mark.parametrize("check_out", [date(2025, 1, 1), date(2024, 12, 31)])
    def test_checkout_must_follow_checkin(self, check_out):
        with pytest.raises(InvalidRange):
            build_quote(prop(), [], date(2025, 1, 1), check_out)

    def test_missing_base_price(self):
        with pytest.raises(MissingBasePrice):
            build_quote(prop(base=None), [], date(2025, 1, 1), date(2025, 1, 2))
