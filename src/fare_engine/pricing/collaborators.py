"""Interfaces of the passenger and credit collaborators, with in-memory stores."""

import threading
from collections import defaultdict
from contextlib import AbstractContextManager
from decimal import Decimal
from typing import Protocol

from fare_engine.core.exceptions import InvalidRequestError
from fare_engine.pricing.models import AccountCredit, PassengerDiscount


class PassengerProfileLookup(Protocol):
    def discount_for(self, passenger_id: str) -> PassengerDiscount | None: ...


class CreditBalanceLookup(Protocol):
    def credit_for(self, passenger_id: str) -> AccountCredit | None: ...


class CreditLedger(Protocol):
    def lock_for(self, passenger_id: str) -> AbstractContextManager[object]: ...

    def balance(self, passenger_id: str) -> Decimal: ...

    def debit(self, passenger_id: str, amount: Decimal) -> None: ...


class InMemoryPassengerDirectory:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._discounts: dict[str, PassengerDiscount] = {}

    def set_discount(self, passenger_id: str, discount: PassengerDiscount | None) -> None:
        with self._lock:
            if discount is None:
                self._discounts.pop(passenger_id, None)
            else:
                self._discounts[passenger_id] = discount

    def discount_for(self, passenger_id: str) -> PassengerDiscount | None:
        with self._lock:
            return self._discounts.get(passenger_id)


class InMemoryCreditLedger:
    """Account-credit balances with debits serialized per passenger."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: defaultdict[str, threading.RLock] = defaultdict(threading.RLock)
        self._balances: dict[str, Decimal] = {}

    def lock_for(self, passenger_id: str) -> threading.RLock:
        with self._guard:
            return self._locks[passenger_id]

    def balance(self, passenger_id: str) -> Decimal:
        with self.lock_for(passenger_id):
            return self._balances.get(passenger_id, Decimal("0"))

    def credit_for(self, passenger_id: str) -> AccountCredit | None:
        with self.lock_for(passenger_id):
            if passenger_id not in self._balances:
                return None
            return AccountCredit(passenger_id=passenger_id, balance=self._balances[passenger_id])

    def top_up(self, passenger_id: str, amount: Decimal) -> Decimal:
        if amount <= 0:
            raise InvalidRequestError("top-up amount must be positive")
        with self.lock_for(passenger_id):
            self._balances[passenger_id] = self._balances.get(passenger_id, Decimal("0")) + amount
            return self._balances[passenger_id]

    def debit(self, passenger_id: str, amount: Decimal) -> None:
        with self.lock_for(passenger_id):
            balance = self._balances.get(passenger_id, Decimal("0"))
            if amount > balance:
                raise InvalidRequestError(
                    "debit exceeds credit balance",
                    details={"passenger_id": passenger_id, "balance": str(balance)},
                )
            self._balances[passenger_id] = balance - amount
