from datetime import UTC, datetime, time, timedelta, timezone
from decimal import Decimal

import pytest

from fare_engine.pricing.surge import SurgeEvaluator, day_of_week, window_matches
from fare_engine.rules.models import SurgeWindow

# 2026-10-16 is a Friday, 2026-10-18 a Sunday
FRIDAY = datetime(2026, 10, 16)
SATURDAY = datetime(2026, 10, 17)
SUNDAY = datetime(2026, 10, 18)


def window(day: int, start: str, end: str, multiplier: str = "1.5") -> SurgeWindow:
    return SurgeWindow(
        day_of_week=day,
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        multiplier=Decimal(multiplier),
    )


def at(day: datetime, clock: str) -> datetime:
    t = time.fromisoformat(clock)
    return day.replace(hour=t.hour, minute=t.minute)


@pytest.fixture
def evaluator():
    return SurgeEvaluator()


@pytest.mark.unit
class TestDayOfWeek:
    def test_sunday_is_zero(self):
        assert day_of_week(SUNDAY) == 0

    def test_friday_is_five(self):
        assert day_of_week(FRIDAY) == 5

    def test_saturday_is_six(self):
        assert day_of_week(SATURDAY) == 6


@pytest.mark.unit
class TestWindowMatching:
    def test_inside_window(self):
        assert window_matches(window(5, "17:00", "19:00"), at(FRIDAY, "18:00"))

    def test_start_is_inclusive(self):
        assert window_matches(window(5, "17:00", "19:00"), at(FRIDAY, "17:00"))

    def test_end_is_exclusive(self):
        assert not window_matches(window(5, "17:00", "19:00"), at(FRIDAY, "19:00"))

    def test_wrong_day(self):
        assert not window_matches(window(5, "17:00", "19:00"), at(SATURDAY, "18:00"))

    def test_every_day(self):
        w = window(-1, "07:00", "09:00")
        assert window_matches(w, at(SUNDAY, "08:30"))
        assert window_matches(w, at(FRIDAY, "07:00"))

    def test_wraparound_before_midnight_on_start_day(self):
        assert window_matches(window(5, "22:00", "02:00"), at(FRIDAY, "23:30"))

    def test_wraparound_after_midnight_credits_start_day(self):
        assert window_matches(window(5, "22:00", "02:00"), at(SATURDAY, "01:15"))

    def test_wraparound_after_midnight_not_on_start_day_itself(self):
        # Friday 01:15 belongs to Thursday's window, not Friday's
        assert not window_matches(window(5, "22:00", "02:00"), at(FRIDAY, "01:15"))

    def test_wraparound_saturday_into_sunday(self):
        assert window_matches(window(6, "23:00", "03:00"), at(SUNDAY, "02:59"))
        assert not window_matches(window(6, "23:00", "03:00"), at(SUNDAY, "03:00"))

    def test_wraparound_gap(self):
        assert not window_matches(window(-1, "22:00", "02:00"), at(FRIDAY, "12:00"))

    def test_empty_window(self):
        assert not window_matches(window(-1, "10:00", "10:00"), at(FRIDAY, "10:00"))

    def test_aware_timestamp_uses_own_wall_clock(self):
        eastern = timezone(timedelta(hours=-4))
        pickup = datetime(2026, 10, 16, 18, 0, tzinfo=eastern)
        assert window_matches(window(5, "17:00", "19:00"), pickup)
        assert pickup.astimezone(UTC).hour == 22


@pytest.mark.unit
class TestSurgeEvaluator:
    def test_friday_evening_surge(self, evaluator):
        result = evaluator.evaluate(
            [window(5, "17:00", "19:00", "1.5")], at(FRIDAY, "18:00"), Decimal("100")
        )
        assert result.multiplier == Decimal("1.5")
        assert result.amount == Decimal("50.00")
        assert result.window is not None

    def test_no_match(self, evaluator):
        result = evaluator.evaluate(
            [window(5, "17:00", "19:00")], at(FRIDAY, "20:00"), Decimal("100")
        )
        assert result.multiplier == Decimal("1")
        assert result.amount == Decimal("0")
        assert result.window is None

    def test_no_windows(self, evaluator):
        result = evaluator.evaluate([], at(FRIDAY, "18:00"), Decimal("100"))
        assert result.multiplier == Decimal("1")
        assert result.amount == Decimal("0")

    def test_highest_multiplier_wins(self, evaluator):
        windows = [
            window(-1, "16:00", "20:00", "1.25"),
            window(5, "17:00", "19:00", "2.0"),
            window(5, "18:00", "18:30", "1.5"),
        ]
        result = evaluator.evaluate(windows, at(FRIDAY, "18:10"), Decimal("80"))
        assert result.multiplier == Decimal("2.0")
        assert result.amount == Decimal("80")

    def test_tie_keeps_first_declared(self, evaluator):
        first = window(-1, "16:00", "20:00", "1.5")
        second = window(5, "17:00", "19:00", "1.5")
        result = evaluator.evaluate([first, second], at(FRIDAY, "18:00"), Decimal("100"))
        assert result.window == first

    def test_unit_multiplier_has_no_amount(self, evaluator):
        result = evaluator.evaluate(
            [window(-1, "00:00", "23:59", "1.0")], at(FRIDAY, "12:00"), Decimal("100")
        )
        assert result.multiplier == Decimal("1")
        assert result.amount == Decimal("0")

    def test_amount_uses_reported_multiplier(self, evaluator):
        result = evaluator.evaluate(
            [window(5, "17:00", "19:00", "1.255")], at(FRIDAY, "18:00"), Decimal("100")
        )
        assert str(result.multiplier) == "1.26"
        assert result.amount == Decimal("100") * (result.multiplier - 1)
        assert result.amount == Decimal("26.00")

    def test_no_surge_reports_two_places(self, evaluator):
        result = evaluator.evaluate([], at(FRIDAY, "18:00"), Decimal("100"))
        assert str(result.multiplier) == "1.00"
