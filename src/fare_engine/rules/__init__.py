from .catalog import ResolvedRule, RuleCatalog
from .models import (
    AirportFee,
    DistanceTier,
    Hourly,
    MeetAndGreet,
    PricingMode,
    PricingRule,
    ServiceType,
    SurgeWindow,
    TransferFlat,
    TransferTiered,
    VehicleType,
)
from .validation import validate_rule

__all__ = [
    "RuleCatalog",
    "ResolvedRule",
    "PricingRule",
    "DistanceTier",
    "SurgeWindow",
    "AirportFee",
    "MeetAndGreet",
    "VehicleType",
    "ServiceType",
    "PricingMode",
    "TransferTiered",
    "TransferFlat",
    "Hourly",
    "validate_rule",
]
