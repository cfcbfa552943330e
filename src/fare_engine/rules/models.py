"""Pricing rule models and the pricing-mode tagged union."""

from datetime import UTC, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def as_utc(value: datetime) -> datetime:
    """Normalize for comparison; naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class VehicleType(str, Enum):
    BUSINESS_SEDAN = "business_sedan"
    BUSINESS_SUV = "business_suv"
    FIRST_CLASS_SEDAN = "first_class_sedan"
    FIRST_CLASS_SUV = "first_class_suv"
    BUSINESS_VAN = "business_van"


class ServiceType(str, Enum):
    TRANSFER = "transfer"
    HOURLY = "hourly"


class RuleItem(BaseModel):
    """Immutable building block of a rule; accepts camelCase record keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class DistanceTier(RuleItem):
    """One band of a progressive distance schedule.

    Example schedule: first 20 miles at $0, next 24.45 miles at $4.45,
    remaining miles at $3.75.
    """

    miles: Decimal = Decimal("0")
    rate_per_mile: Decimal
    is_remaining: bool = False


class SurgeWindow(RuleItem):
    # 0 = Sunday ... 6 = Saturday, -1 = every day
    day_of_week: int
    start_time: time
    end_time: time
    multiplier: Decimal

    @property
    def wraps_midnight(self) -> bool:
        return self.end_time < self.start_time


class AirportFee(RuleItem):
    airport_code: str
    fee: Decimal
    waiver_minutes: Decimal | None = None

    @field_validator("airport_code")
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return v.strip().upper()


class MeetAndGreet(RuleItem):
    enabled: bool = False
    charge: Decimal = Decimal("0")


class PricingRule(BaseModel):
    """Admin-configured price policy for one vehicle and service type."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    rule_id: str = Field(default_factory=lambda: str(uuid4()), alias="id")
    vehicle_type: VehicleType
    service_type: ServiceType
    # Transfer pricing
    base_rate: Decimal | None = None
    per_mile_rate: Decimal | None = None
    # Hourly pricing
    hourly_rate: Decimal | None = None
    minimum_hours: Decimal | None = None
    overtime_rate: Decimal | None = None
    # Common
    minimum_fare: Decimal | None = None
    gratuity_percent: Decimal = Decimal("20.00")
    effective_start: datetime | None = None
    effective_end: datetime | None = None
    is_active: bool = True
    distance_tiers: list[DistanceTier] = Field(default_factory=list)
    surge_windows: list[SurgeWindow] = Field(default_factory=list, alias="surgePricing")
    airport_fees: list[AirportFee] = Field(default_factory=list)
    meet_and_greet: MeetAndGreet | None = None

    @property
    def key(self) -> tuple[VehicleType, ServiceType]:
        return (self.vehicle_type, self.service_type)


class TransferTiered(RuleItem):
    kind: Literal["transfer_tiered"] = "transfer_tiered"
    tiers: tuple[DistanceTier, ...]


class TransferFlat(RuleItem):
    kind: Literal["transfer_flat"] = "transfer_flat"
    base_rate: Decimal
    per_mile_rate: Decimal


class Hourly(RuleItem):
    kind: Literal["hourly"] = "hourly"
    hourly_rate: Decimal
    minimum_hours: Decimal
    overtime_rate: Decimal | None = None


PricingMode = Annotated[TransferTiered | TransferFlat | Hourly, Field(discriminator="kind")]
