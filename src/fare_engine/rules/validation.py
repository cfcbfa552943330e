"""Rule-save time consistency checks.

A rule that passes ``validate_rule`` can always be priced: the returned
pricing mode carries exactly the fields its calculator needs.
"""

from decimal import Decimal

from fare_engine.core.exceptions import ConfigurationError
from fare_engine.rules.models import (
    Hourly,
    PricingMode,
    PricingRule,
    ServiceType,
    TransferFlat,
    TransferTiered,
    as_utc,
)

ZERO = Decimal("0")
MULTIPLIER_STEP = Decimal("0.01")


def _config_error(rule: PricingRule, message: str, **details: object) -> ConfigurationError:
    return ConfigurationError(message, details={"rule_id": rule.rule_id, **details})


def _check_non_negative(rule: PricingRule) -> None:
    scalars = {
        "base_rate": rule.base_rate,
        "per_mile_rate": rule.per_mile_rate,
        "hourly_rate": rule.hourly_rate,
        "minimum_hours": rule.minimum_hours,
        "overtime_rate": rule.overtime_rate,
        "minimum_fare": rule.minimum_fare,
    }
    for name, value in scalars.items():
        if value is not None and value < ZERO:
            raise _config_error(rule, f"{name} must not be negative", field=name)

    if not ZERO <= rule.gratuity_percent <= Decimal("100"):
        raise _config_error(rule, "gratuity_percent must be between 0 and 100")

    for fee in rule.airport_fees:
        if fee.fee < ZERO:
            raise _config_error(rule, "airport fee must not be negative", airport=fee.airport_code)
        if fee.waiver_minutes is not None and fee.waiver_minutes < ZERO:
            raise _config_error(
                rule, "waiver_minutes must not be negative", airport=fee.airport_code
            )

    if rule.meet_and_greet is not None and rule.meet_and_greet.charge < ZERO:
        raise _config_error(rule, "meet and greet charge must not be negative")


def _check_tiers(rule: PricingRule) -> None:
    tiers = rule.distance_tiers
    last = len(tiers) - 1
    for index, tier in enumerate(tiers):
        if tier.rate_per_mile < ZERO:
            raise _config_error(rule, "tier rate must not be negative", tier=index)
        if tier.miles < ZERO:
            raise _config_error(rule, "tier miles must not be negative", tier=index)
        if tier.is_remaining:
            if index != last:
                raise _config_error(rule, "Remaining tier must be the last tier", tier=index)
        elif tier.miles <= ZERO:
            raise _config_error(rule, "non-remaining tier must cover a positive distance", tier=index)


def _check_surge(rule: PricingRule, max_surge_multiplier: float) -> None:
    ceiling = Decimal(str(max_surge_multiplier))
    for index, window in enumerate(rule.surge_windows):
        if window.day_of_week not in range(-1, 7):
            raise _config_error(rule, "surge day_of_week must be -1 or 0-6", window=index)
        if not Decimal("1") <= window.multiplier <= ceiling:
            raise _config_error(
                rule, f"surge multiplier must be between 1 and {ceiling}", window=index
            )
        if window.multiplier != window.multiplier.quantize(MULTIPLIER_STEP):
            raise _config_error(
                rule, "surge multiplier allows at most two decimal places", window=index
            )


def validate_rule(rule: PricingRule, max_surge_multiplier: float = 5.0) -> PricingMode:
    """Check a rule for internal consistency and resolve its pricing mode.

    Raises:
        ConfigurationError: when the rule could not be priced as configured.
    """
    _check_non_negative(rule)
    _check_tiers(rule)
    _check_surge(rule, max_surge_multiplier)

    if (
        rule.effective_start is not None
        and rule.effective_end is not None
        and as_utc(rule.effective_end) <= as_utc(rule.effective_start)
    ):
        raise _config_error(rule, "Effective end date must be after effective start date")

    if rule.service_type is ServiceType.HOURLY:
        if rule.hourly_rate is None or rule.minimum_hours is None:
            raise _config_error(rule, "Hourly service type requires hourlyRate and minimumHours")
        return Hourly(
            hourly_rate=rule.hourly_rate,
            minimum_hours=rule.minimum_hours,
            overtime_rate=rule.overtime_rate,
        )

    if rule.distance_tiers:
        return TransferTiered(tiers=tuple(rule.distance_tiers))
    if rule.base_rate is None and rule.per_mile_rate is None:
        raise _config_error(
            rule, "Transfer service requires distance tiers, a per-mile rate or a base rate"
        )
    return TransferFlat(
        base_rate=rule.base_rate or ZERO,
        per_mile_rate=rule.per_mile_rate or ZERO,
    )
