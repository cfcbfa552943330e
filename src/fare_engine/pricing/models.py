"""Fare request, collaborator records and the frozen fare breakdown."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fare_engine.rules.models import (
    AirportFee,
    PricingMode,
    ServiceType,
    SurgeWindow,
    VehicleType,
)

CENT = Decimal("0.01")
ZERO = Decimal("0")


def money(value: Decimal) -> Decimal:
    """Round a monetary amount to cents, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class Location(BaseModel):
    # Coordinates are range-checked by the engine so a bad leg surfaces as
    # InvalidLocationError rather than a schema error.
    lat: float | None = None
    lon: float | None = None
    airport_code: str | None = None

    @field_validator("airport_code")
    @classmethod
    def normalize_code(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip().upper()
        return v or None


class FareRequest(BaseModel):
    """Everything the engine needs to price one trip."""

    vehicle_type: VehicleType
    service_type: ServiceType
    pickup: Location
    destination: Location | None = None
    via_points: list[Location] = Field(default_factory=list)
    scheduled_at: datetime
    requested_hours: Decimal | None = Field(default=None, gt=0)
    # Post-trip only; a quote never knows the actual duration
    actual_hours: Decimal | None = Field(default=None, ge=0)
    passenger_id: str | None = None
    flight_waiver_signals: dict[str, bool] = Field(default_factory=dict)
    activity_delay_minutes: dict[str, Decimal] = Field(default_factory=dict)
    requested_credit_amount: Decimal | None = Field(default=None, ge=0)
    meet_and_greet: bool = False

    @field_validator("flight_waiver_signals", "activity_delay_minutes")
    @classmethod
    def upper_case_codes(cls, v: dict) -> dict:
        return {code.strip().upper(): value for code, value in v.items()}


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class PassengerDiscount(BaseModel):
    """Discount configured on a passenger profile."""

    discount_type: DiscountType
    discount_value: Decimal = Field(ge=0)


class AccountCredit(BaseModel):
    passenger_id: str
    balance: Decimal = Field(ge=0)


class RuleSnapshot(BaseModel):
    """Copy of the rule values a breakdown was computed from."""

    model_config = ConfigDict(frozen=True)

    rule_id: str
    vehicle_type: VehicleType
    service_type: ServiceType
    mode: PricingMode
    minimum_fare: Decimal | None
    gratuity_percent: Decimal
    matched_surge_window: SurgeWindow | None = None
    charged_airport_fees: tuple[AirportFee, ...] = ()
    waived_airport_fees: tuple[AirportFee, ...] = ()


class FareBreakdown(BaseModel):
    """Itemized price of a trip; immutable once computed."""

    model_config = ConfigDict(frozen=True)

    base_fare: Decimal
    surge_multiplier: Decimal
    surge_amount: Decimal
    airport_fee_amount: Decimal
    meet_and_greet_amount: Decimal = ZERO
    gratuity_amount: Decimal
    regular_price: Decimal
    discount_type: DiscountType | None = None
    discount_percentage: Decimal = ZERO
    discount_amount: Decimal
    credit_amount_applied: Decimal
    total_amount: Decimal
    remaining_amount: Decimal
    distance_miles: Decimal | None = None
    billed_hours: Decimal | None = None
    computed_at: datetime
    rule: RuleSnapshot

    @property
    def subtotal(self) -> Decimal:
        return self.regular_price
