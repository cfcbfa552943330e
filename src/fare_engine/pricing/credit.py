import logging
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal

from fare_engine.pricing.collaborators import CreditLedger
from fare_engine.pricing.models import CENT

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class CreditResult:
    max_usable: Decimal
    applied: Decimal
    remaining: Decimal


class CreditApplier:
    """Offsets a fare total with a passenger's account credit.

    The quote-time figure is advisory; ``commit`` re-checks the balance
    inside the ledger so two bookings racing on one stale balance cannot
    both spend it.
    """

    def apply(
        self, balance: Decimal, total_amount: Decimal, requested_amount: Decimal | None
    ) -> CreditResult:
        # Whole cents only, never rounded up past the balance
        max_usable = max(min(balance, total_amount), ZERO).quantize(CENT, rounding=ROUND_DOWN)
        requested = max(requested_amount or ZERO, ZERO)
        applied = min(requested, max_usable).quantize(CENT, rounding=ROUND_DOWN)
        if requested > max_usable:
            logger.info(
                "Clamped requested credit %s to %s", requested, max_usable
            )
        return CreditResult(
            max_usable=max_usable,
            applied=applied,
            remaining=total_amount - applied,
        )

    def commit(self, ledger: CreditLedger, passenger_id: str, amount: Decimal) -> Decimal:
        """Debit up to ``amount`` against the balance current at commit time.

        Returns the amount actually debited.
        """
        if amount <= ZERO:
            return ZERO
        with ledger.lock_for(passenger_id):
            balance = ledger.balance(passenger_id)
            debit = min(amount, balance)
            if debit < amount:
                logger.warning(
                    "Credit balance changed since quote for passenger %s; debiting %s of %s",
                    passenger_id,
                    debit,
                    amount,
                )
            if debit > ZERO:
                ledger.debit(passenger_id, debit)
        return debit
