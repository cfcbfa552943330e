from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, time
from decimal import ROUND_HALF_UP, Decimal

from fare_engine.rules.models import SurgeWindow

ONE = Decimal("1")
MULTIPLIER_STEP = Decimal("0.01")
NO_SURGE = Decimal("1.00")
EVERY_DAY = -1


@dataclass(frozen=True)
class SurgeResult:
    multiplier: Decimal
    amount: Decimal
    window: SurgeWindow | None = None


def day_of_week(moment: datetime) -> int:
    """Weekday with Sunday as 0, matching surge window configuration."""
    return (moment.weekday() + 1) % 7


def window_matches(window: SurgeWindow, moment: datetime) -> bool:
    """Test whether ``moment`` falls inside ``window``.

    Windows are half-open ``[start, end)`` in wall-clock time. A window that
    wraps midnight belongs to the day it starts on, so its early-morning
    part matches on the following weekday.
    """
    clock: time = moment.time().replace(tzinfo=None)
    today = day_of_week(moment)
    yesterday = (today - 1) % 7

    def on(day: int) -> bool:
        return window.day_of_week == EVERY_DAY or window.day_of_week == day

    if not window.wraps_midnight:
        return on(today) and window.start_time <= clock < window.end_time

    if clock >= window.start_time:
        return on(today)
    if clock < window.end_time:
        return on(yesterday)
    return False


class SurgeEvaluator:
    """Matches a scheduled pickup against time-windowed surge multipliers."""

    def evaluate(
        self, windows: Sequence[SurgeWindow], pickup_at: datetime, base_fare: Decimal
    ) -> SurgeResult:
        best: SurgeWindow | None = None
        for window in windows:
            if not window_matches(window, pickup_at):
                continue
            # Most aggressive surge wins; first declared keeps a tie
            if best is None or window.multiplier > best.multiplier:
                best = window

        if best is None:
            return SurgeResult(multiplier=NO_SURGE, amount=Decimal("0"))

        # The reported multiplier is the one the amount is computed from
        multiplier = best.multiplier.quantize(MULTIPLIER_STEP, rounding=ROUND_HALF_UP)
        if multiplier == ONE:
            return SurgeResult(multiplier=NO_SURGE, amount=Decimal("0"), window=best)

        return SurgeResult(
            multiplier=multiplier,
            amount=base_fare * (multiplier - ONE),
            window=best,
        )
