from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from fare_engine.core.exceptions import ConfigurationError, InvalidRequestError
from fare_engine.rules.models import DistanceTier, Hourly, PricingMode, TransferFlat, TransferTiered

ZERO = Decimal("0")


@dataclass(frozen=True)
class BaseFareResult:
    amount: Decimal
    distance_miles: Decimal | None = None
    billed_hours: Decimal | None = None
    minimum_applied: bool = False


def tiered_fare(distance: Decimal, tiers: Sequence[DistanceTier]) -> Decimal:
    """Price a distance against a progressive tier schedule.

    Each tier consumes its own slice of the trip in order; a remaining tier
    takes whatever is left. Distance beyond a schedule without a remaining
    tier is not charged.
    """
    remaining = distance
    cost = ZERO
    for tier in tiers:
        if remaining <= ZERO:
            break
        if tier.is_remaining:
            cost += remaining * tier.rate_per_mile
            remaining = ZERO
            break
        used = min(remaining, tier.miles)
        cost += used * tier.rate_per_mile
        remaining -= used
    return cost


def flat_fare(distance: Decimal, base_rate: Decimal, per_mile_rate: Decimal) -> Decimal:
    return base_rate + per_mile_rate * distance


def hourly_fare(
    mode: Hourly, requested_hours: Decimal, actual_hours: Decimal | None = None
) -> tuple[Decimal, Decimal]:
    """Return ``(amount, billed_hours)`` for an hourly booking.

    Billed hours are the requested hours raised to the rule minimum. Actual
    hours past that bill at the overtime rate, when the rule has one.
    """
    billed_hours = max(requested_hours, mode.minimum_hours)
    amount = mode.hourly_rate * billed_hours
    if (
        actual_hours is not None
        and mode.overtime_rate is not None
        and actual_hours > billed_hours
    ):
        extra = actual_hours - billed_hours
        amount += mode.overtime_rate * extra
        billed_hours = actual_hours
    return amount, billed_hours


class BaseFareCalculator:
    """Computes the pre-surcharge fare for a resolved pricing mode."""

    def calculate(
        self,
        mode: PricingMode,
        *,
        minimum_fare: Decimal | None = None,
        distance_miles: Decimal | None = None,
        requested_hours: Decimal | None = None,
        actual_hours: Decimal | None = None,
    ) -> BaseFareResult:
        """
        Calculate the base fare.

        A quote passes requested hours only; the post-trip recomputation
        also passes the actual duration.
        """
        distance = None
        billed_hours = None

        if isinstance(mode, Hourly):
            if requested_hours is None:
                raise InvalidRequestError("requested_hours is required for hourly service")
            if requested_hours <= ZERO:
                raise InvalidRequestError("requested_hours must be positive")
            amount, billed_hours = hourly_fare(mode, requested_hours, actual_hours)
        else:
            if distance_miles is None:
                raise InvalidRequestError("distance is required for transfer service")
            if distance_miles < ZERO:
                raise InvalidRequestError("distance must be non-negative")
            distance = distance_miles
            if isinstance(mode, TransferTiered):
                amount = tiered_fare(distance, mode.tiers)
            elif isinstance(mode, TransferFlat):
                amount = flat_fare(distance, mode.base_rate, mode.per_mile_rate)
            else:
                raise ConfigurationError(
                    "Unsupported pricing mode", details={"kind": getattr(mode, "kind", None)}
                )

        minimum_applied = minimum_fare is not None and amount < minimum_fare
        if minimum_applied:
            amount = minimum_fare

        return BaseFareResult(
            amount=amount,
            distance_miles=distance,
            billed_hours=billed_hours,
            minimum_applied=minimum_applied,
        )
