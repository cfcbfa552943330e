from .aggregator import FareAggregator, compute_fare
from .models import (
    AccountCredit,
    DiscountType,
    FareBreakdown,
    FareRequest,
    Location,
    PassengerDiscount,
    RuleSnapshot,
)

__all__ = [
    "FareAggregator",
    "compute_fare",
    "FareRequest",
    "FareBreakdown",
    "Location",
    "PassengerDiscount",
    "DiscountType",
    "AccountCredit",
    "RuleSnapshot",
]
