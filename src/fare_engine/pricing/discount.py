from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal

from fare_engine.pricing.models import CENT, DiscountType, PassengerDiscount, money

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class DiscountResult:
    discount_type: DiscountType | None
    percentage: Decimal
    amount: Decimal
    total: Decimal


class DiscountApplier:
    """Applies a passenger-level percentage or fixed discount to a subtotal.

    When the rule sets a minimum fare, the discount never takes the total
    below it.
    """

    def apply(
        self,
        subtotal: Decimal,
        discount: PassengerDiscount | None,
        minimum_fare: Decimal | None = None,
    ) -> DiscountResult:
        if discount is None or discount.discount_value <= ZERO:
            return DiscountResult(None, ZERO, ZERO, max(subtotal, ZERO))

        if discount.discount_type is DiscountType.PERCENTAGE:
            percentage = discount.discount_value
            amount = subtotal * percentage / HUNDRED
        else:
            percentage = ZERO
            amount = discount.discount_value

        ceiling = max(subtotal, ZERO)
        if minimum_fare is not None:
            ceiling = max(subtotal - minimum_fare, ZERO).quantize(CENT, rounding=ROUND_DOWN)

        amount = max(min(money(amount), ceiling), ZERO)
        total = max(subtotal - amount, ZERO)
        return DiscountResult(discount.discount_type, percentage, amount, total)
