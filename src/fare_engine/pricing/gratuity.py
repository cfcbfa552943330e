from decimal import Decimal

HUNDRED = Decimal("100")


class GratuityCalculator:
    """Computes the driver tip on the pre-discount fare.

    Discounts reduce what the traveler pays, not what the driver is owed,
    so the tip base excludes them.
    """

    def calculate(
        self,
        gratuity_percent: Decimal,
        base_fare: Decimal,
        surge_amount: Decimal,
        airport_fee_amount: Decimal,
    ) -> Decimal:
        return gratuity_percent / HUNDRED * (base_fare + surge_amount + airport_fee_amount)
