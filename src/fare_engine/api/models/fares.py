from decimal import Decimal

from pydantic import BaseModel

from fare_engine.rules.models import DistanceTier, ServiceType, VehicleType


class ErrorResponse(BaseModel):
    message: str
    error: str
    details: dict = {}


class AvailableRule(BaseModel):
    """Public pricing summary for one vehicle type."""

    rule_id: str
    vehicle_type: VehicleType
    service_type: ServiceType
    base_rate: Decimal | None = None
    per_mile_rate: Decimal | None = None
    hourly_rate: Decimal | None = None
    minimum_hours: Decimal | None = None
    minimum_fare: Decimal | None = None
    gratuity_percent: Decimal
    distance_tiers: list[DistanceTier] = []
    has_distance_tiers: bool = False
