from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from fare_engine.rules.models import AirportFee


@dataclass(frozen=True)
class AirportFeeResult:
    amount: Decimal
    charged: tuple[AirportFee, ...] = field(default_factory=tuple)
    waived: tuple[AirportFee, ...] = field(default_factory=tuple)


def is_waived(
    fee: AirportFee,
    waiver_signals: Mapping[str, bool],
    delay_minutes: Mapping[str, Decimal],
) -> bool:
    """Apply the caller's flight data to one fee.

    An explicit signal wins. Otherwise a measured delay within the fee's
    waiver window waives it.
    """
    signal = waiver_signals.get(fee.airport_code)
    if signal is not None:
        return signal
    delay = delay_minutes.get(fee.airport_code)
    return delay is not None and fee.waiver_minutes is not None and delay <= fee.waiver_minutes


class AirportFeeEvaluator:
    """Adds fixed fees for trips that start or end at a configured airport."""

    def evaluate(
        self,
        fees: Sequence[AirportFee],
        pickup_code: str | None,
        destination_code: str | None,
        waiver_signals: Mapping[str, bool] | None = None,
        delay_minutes: Mapping[str, Decimal] | None = None,
    ) -> AirportFeeResult:
        codes = {code.upper() for code in (pickup_code, destination_code) if code}
        waiver_signals = waiver_signals or {}
        delay_minutes = delay_minutes or {}

        total = Decimal("0")
        charged: list[AirportFee] = []
        waived: list[AirportFee] = []
        for fee in fees:
            if fee.airport_code not in codes:
                continue
            if is_waived(fee, waiver_signals, delay_minutes):
                waived.append(fee)
                continue
            total += fee.fee
            charged.append(fee)

        return AirportFeeResult(amount=total, charged=tuple(charged), waived=tuple(waived))
