"""Orchestrates the pricing stages into a single itemized breakdown.

Stages run in a fixed order: rule resolution, base fare, surge, airport
fees, meet & greet, gratuity, discount, credit. Each monetary line is
rounded to cents before the next stage consumes it, so the breakdown
always adds up exactly.
"""

import logging
from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

from fare_engine.core.exceptions import ConfigurationError, NoApplicableRuleError
from fare_engine.fare_logging import log_quote_context
from fare_engine.geo.distance import path_miles, validate_point
from fare_engine.pricing.airport_fees import AirportFeeEvaluator
from fare_engine.pricing.base_fare import BaseFareCalculator
from fare_engine.pricing.collaborators import (
    CreditBalanceLookup,
    CreditLedger,
    PassengerProfileLookup,
)
from fare_engine.pricing.credit import CreditApplier
from fare_engine.pricing.discount import DiscountApplier
from fare_engine.pricing.gratuity import GratuityCalculator
from fare_engine.pricing.models import (
    ZERO,
    AccountCredit,
    FareBreakdown,
    FareRequest,
    PassengerDiscount,
    RuleSnapshot,
    money,
)
from fare_engine.pricing.surge import SurgeEvaluator
from fare_engine.rules.catalog import RuleCatalog
from fare_engine.rules.models import ServiceType

logger = logging.getLogger(__name__)


def _trip_distance(request: FareRequest, precision: int) -> Decimal:
    validate_point(request.destination, "destination")
    for index, via in enumerate(request.via_points):
        validate_point(via, f"via point {index + 1}")

    points = [request.pickup, *request.via_points, request.destination]
    miles = path_miles(points)
    return Decimal(str(round(miles, precision)))


def compute_fare(
    request: FareRequest,
    catalog: RuleCatalog,
    passenger_discount: PassengerDiscount | None = None,
    account_credit: AccountCredit | None = None,
    *,
    distance_precision: int = 2,
) -> FareBreakdown:
    """Price a trip request against the catalog.

    Discount and credit are explicit inputs; nothing is read from shared
    state beyond one rule snapshot taken from the catalog.

    Raises:
        InvalidLocationError: a required leg has missing or invalid coordinates.
        InvalidRequestError: a field required by the service type is missing.
        NoApplicableRuleError: no active rule covers the trip.
        ConfigurationError: the resolved rule cannot be priced.
    """
    quote_id = uuid4().hex
    with log_quote_context(quote_id, passenger_id=request.passenger_id or "-"):
        try:
            return _compute(
                request, catalog, passenger_discount, account_credit, distance_precision
            )
        except NoApplicableRuleError as exc:
            logger.warning("Pricing unavailable: %s %s", exc.message, exc.details)
            raise
        except ConfigurationError as exc:
            logger.error("Pricing rule misconfigured: %s %s", exc.message, exc.details)
            raise


def _compute(
    request: FareRequest,
    catalog: RuleCatalog,
    passenger_discount: PassengerDiscount | None,
    account_credit: AccountCredit | None,
    distance_precision: int,
) -> FareBreakdown:
    validate_point(request.pickup, "pickup")
    distance = None
    if request.service_type is ServiceType.TRANSFER:
        distance = _trip_distance(request, distance_precision)

    resolved = catalog.resolve_with_mode(
        request.vehicle_type, request.service_type, request.scheduled_at
    )
    rule = resolved.rule

    base = BaseFareCalculator().calculate(
        resolved.mode,
        minimum_fare=rule.minimum_fare,
        distance_miles=distance,
        requested_hours=request.requested_hours,
        actual_hours=request.actual_hours,
    )
    base_fare = money(base.amount)

    surge = SurgeEvaluator().evaluate(rule.surge_windows, request.scheduled_at, base_fare)
    surge_amount = money(surge.amount)

    destination_code = request.destination.airport_code if request.destination else None
    airport = AirportFeeEvaluator().evaluate(
        rule.airport_fees,
        request.pickup.airport_code,
        destination_code,
        request.flight_waiver_signals,
        request.activity_delay_minutes,
    )
    airport_fee_amount = money(airport.amount)

    meet_and_greet_amount = ZERO
    if request.meet_and_greet and rule.meet_and_greet and rule.meet_and_greet.enabled:
        meet_and_greet_amount = money(rule.meet_and_greet.charge)

    gratuity_amount = money(
        GratuityCalculator().calculate(
            rule.gratuity_percent, base_fare, surge_amount, airport_fee_amount
        )
    )

    subtotal = base_fare + surge_amount + airport_fee_amount + meet_and_greet_amount + gratuity_amount
    discount = DiscountApplier().apply(subtotal, passenger_discount, rule.minimum_fare)
    discount_amount = money(discount.amount)
    total_amount = max(subtotal - discount_amount, ZERO)

    balance = account_credit.balance if account_credit else ZERO
    credit = CreditApplier().apply(balance, total_amount, request.requested_credit_amount)
    credit_applied = money(credit.applied)

    snapshot = RuleSnapshot(
        rule_id=rule.rule_id,
        vehicle_type=rule.vehicle_type,
        service_type=rule.service_type,
        mode=resolved.mode,
        minimum_fare=rule.minimum_fare,
        gratuity_percent=rule.gratuity_percent,
        matched_surge_window=surge.window,
        charged_airport_fees=airport.charged,
        waived_airport_fees=airport.waived,
    )

    breakdown = FareBreakdown(
        base_fare=base_fare,
        surge_multiplier=surge.multiplier,
        surge_amount=surge_amount,
        airport_fee_amount=airport_fee_amount,
        meet_and_greet_amount=meet_and_greet_amount,
        gratuity_amount=gratuity_amount,
        regular_price=subtotal,
        discount_type=discount.discount_type,
        discount_percentage=discount.percentage,
        discount_amount=discount_amount,
        credit_amount_applied=credit_applied,
        total_amount=total_amount,
        remaining_amount=total_amount - credit_applied,
        distance_miles=distance,
        billed_hours=base.billed_hours,
        computed_at=datetime.now(UTC),
        rule=snapshot,
    )
    logger.info(
        "Computed fare %s with rule %s (surge x%s)",
        breakdown.total_amount,
        rule.rule_id,
        breakdown.surge_multiplier,
    )
    return breakdown


class FareAggregator:
    """Prices requests, pulling discount and credit from collaborators."""

    def __init__(
        self,
        catalog: RuleCatalog,
        passenger_profiles: PassengerProfileLookup | None = None,
        credit_balances: CreditBalanceLookup | None = None,
        *,
        distance_precision: int = 2,
    ) -> None:
        self.catalog = catalog
        self.passenger_profiles = passenger_profiles
        self.credit_balances = credit_balances
        self.distance_precision = distance_precision

    def compute(self, request: FareRequest) -> FareBreakdown:
        discount = None
        credit = None
        if request.passenger_id:
            if self.passenger_profiles is not None:
                discount = self.passenger_profiles.discount_for(request.passenger_id)
            if self.credit_balances is not None:
                credit = self.credit_balances.credit_for(request.passenger_id)

        return compute_fare(
            request,
            self.catalog,
            discount,
            credit,
            distance_precision=self.distance_precision,
        )

    def commit_credit(
        self, ledger: CreditLedger, passenger_id: str, breakdown: FareBreakdown
    ) -> Decimal:
        """Debit the breakdown's credit, validated against the live balance."""
        return CreditApplier().commit(ledger, passenger_id, breakdown.credit_amount_applied)
