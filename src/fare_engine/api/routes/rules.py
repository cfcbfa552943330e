from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Query

from fare_engine.api.dependencies import CatalogDep
from fare_engine.api.models.fares import AvailableRule
from fare_engine.rules.models import ServiceType

router = APIRouter()


@router.get("/available", response_model=dict[str, AvailableRule])
def available_rules(
    catalog: CatalogDep,
    service_type: Annotated[ServiceType, Query(description="transfer or hourly")],
    as_of: Annotated[datetime | None, Query(description="Defaults to now")] = None,
) -> dict[str, AvailableRule]:
    """List the rule each vehicle type would be priced with."""
    rules = catalog.available(service_type, as_of or datetime.now(UTC))
    return {
        vehicle_type.value: AvailableRule(
            rule_id=rule.rule_id,
            vehicle_type=rule.vehicle_type,
            service_type=rule.service_type,
            base_rate=rule.base_rate,
            per_mile_rate=rule.per_mile_rate,
            hourly_rate=rule.hourly_rate,
            minimum_hours=rule.minimum_hours,
            minimum_fare=rule.minimum_fare,
            gratuity_percent=rule.gratuity_percent,
            distance_tiers=rule.distance_tiers,
            has_distance_tiers=bool(rule.distance_tiers),
        )
        for vehicle_type, rule in rules.items()
    }
