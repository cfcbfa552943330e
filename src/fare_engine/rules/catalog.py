"""In-memory catalog of admin-configured pricing rules."""

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any, TypeVar

from fare_engine.core.exceptions import (
    ConfigurationError,
    InvalidRequestError,
    NoApplicableRuleError,
)
from fare_engine.rules.models import PricingMode, PricingRule, ServiceType, VehicleType, as_utc
from fare_engine.rules.validation import validate_rule

logger = logging.getLogger(__name__)

_EARLIEST = datetime.min.replace(tzinfo=UTC)
_LATEST = datetime.max.replace(tzinfo=UTC)

E = TypeVar("E", bound=Enum)


@dataclass(frozen=True)
class ResolvedRule:
    """A private copy of a rule together with its pre-resolved pricing mode."""

    rule: PricingRule
    mode: PricingMode


def _bounds(rule: PricingRule) -> tuple[datetime, datetime]:
    start = as_utc(rule.effective_start) if rule.effective_start else _EARLIEST
    end = as_utc(rule.effective_end) if rule.effective_end else _LATEST
    return start, end


def _is_effective(rule: PricingRule, as_of: datetime) -> bool:
    start, end = _bounds(rule)
    return start <= as_utc(as_of) <= end


def _coerce(enum_type: type[E], value: E | str, field: str) -> E:
    try:
        return enum_type(value)
    except ValueError:
        raise InvalidRequestError(
            f"Unknown {field}: {value}",
            details={field: str(value), "allowed": [member.value for member in enum_type]},
        ) from None


class RuleCatalog:
    """Holds pricing rules and resolves the one that applies to a trip.

    Rules are validated and deep-copied on the way in and copied again on
    the way out, so an admin edit never leaks into a computation that has
    already resolved its rule.
    """

    def __init__(
        self,
        rules: Iterable[PricingRule] = (),
        *,
        reject_overlapping_rules: bool = True,
        max_surge_multiplier: float = 5.0,
    ) -> None:
        self.reject_overlapping_rules = reject_overlapping_rules
        self.max_surge_multiplier = max_surge_multiplier
        self._lock = threading.RLock()
        self._entries: dict[str, ResolvedRule] = {}
        for rule in rules:
            self.add(rule)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]], **kwargs: Any) -> "RuleCatalog":
        """Build a catalog from JSON-style records (camelCase or snake_case keys)."""
        return cls((PricingRule.model_validate(record) for record in records), **kwargs)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _check_overlap(self, rule: PricingRule) -> None:
        if not (self.reject_overlapping_rules and rule.is_active):
            return
        start, end = _bounds(rule)
        for entry in self._entries.values():
            other = entry.rule
            if other.rule_id == rule.rule_id or not other.is_active or other.key != rule.key:
                continue
            other_start, other_end = _bounds(other)
            if start <= other_end and other_start <= end:
                raise ConfigurationError(
                    "Active pricing rules overlap for the same vehicle and service type",
                    details={
                        "rule_id": rule.rule_id,
                        "conflicts_with": other.rule_id,
                        "vehicle_type": rule.vehicle_type.value,
                        "service_type": rule.service_type.value,
                    },
                )

    def _store(self, rule: PricingRule) -> None:
        mode = validate_rule(rule, self.max_surge_multiplier)
        self._check_overlap(rule)
        self._entries[rule.rule_id] = ResolvedRule(rule=rule.model_copy(deep=True), mode=mode)

    def add(self, rule: PricingRule) -> None:
        """Validate and store a new rule.

        Raises:
            ConfigurationError: invalid rule, duplicate id, or overlapping active rule.
        """
        with self._lock:
            if rule.rule_id in self._entries:
                raise ConfigurationError(
                    f"Pricing rule {rule.rule_id} already exists",
                    details={"rule_id": rule.rule_id},
                )
            self._store(rule)
        logger.info(
            "Added pricing rule %s for %s/%s",
            rule.rule_id,
            rule.vehicle_type.value,
            rule.service_type.value,
        )

    def replace(self, rule: PricingRule) -> None:
        """Swap in a new version of an existing rule."""
        with self._lock:
            if rule.rule_id not in self._entries:
                raise ConfigurationError(
                    f"Pricing rule {rule.rule_id} does not exist",
                    details={"rule_id": rule.rule_id},
                )
            self._store(rule)
        logger.info("Replaced pricing rule %s", rule.rule_id)

    def deactivate(self, rule_id: str) -> None:
        with self._lock:
            entry = self._entries.get(rule_id)
            if entry is None:
                raise ConfigurationError(
                    f"Pricing rule {rule_id} does not exist", details={"rule_id": rule_id}
                )
            rule = entry.rule.model_copy(update={"is_active": False}, deep=True)
            self._entries[rule_id] = ResolvedRule(rule=rule, mode=entry.mode)
        logger.warning("Deactivated pricing rule %s", rule_id)

    def get(self, rule_id: str) -> PricingRule | None:
        with self._lock:
            entry = self._entries.get(rule_id)
            return entry.rule.model_copy(deep=True) if entry else None

    def rules(self) -> list[PricingRule]:
        with self._lock:
            return [entry.rule.model_copy(deep=True) for entry in self._entries.values()]

    def _candidates(
        self, vehicle_type: VehicleType, service_type: ServiceType, as_of: datetime
    ) -> ResolvedRule | None:
        best: ResolvedRule | None = None
        best_start = _EARLIEST
        for entry in self._entries.values():
            rule = entry.rule
            if rule.key != (vehicle_type, service_type) or not rule.is_active:
                continue
            if not _is_effective(rule, as_of):
                continue
            start, _ = _bounds(rule)
            # Latest effective_start wins; ties keep the first-added rule
            if best is None or start > best_start:
                best, best_start = entry, start
        return best

    def resolve_with_mode(
        self, vehicle_type: VehicleType | str, service_type: ServiceType | str, as_of: datetime
    ) -> ResolvedRule:
        """Resolve the applicable rule and return a private snapshot with its mode.

        Raises:
            NoApplicableRuleError: no active rule covers the key on ``as_of``.
            InvalidRequestError: an unknown vehicle or service type was given.
        """
        vehicle_type = _coerce(VehicleType, vehicle_type, "vehicle_type")
        service_type = _coerce(ServiceType, service_type, "service_type")
        with self._lock:
            entry = self._candidates(vehicle_type, service_type, as_of)
            if entry is None:
                raise NoApplicableRuleError(
                    "No active pricing rule found for this vehicle and service type",
                    details={
                        "vehicle_type": vehicle_type.value,
                        "service_type": service_type.value,
                        "as_of": as_of.isoformat(),
                    },
                )
            snapshot = ResolvedRule(rule=entry.rule.model_copy(deep=True), mode=entry.mode)
        logger.debug("Resolved pricing rule %s", snapshot.rule.rule_id)
        return snapshot

    def resolve(
        self, vehicle_type: VehicleType | str, service_type: ServiceType | str, as_of: datetime
    ) -> PricingRule:
        return self.resolve_with_mode(vehicle_type, service_type, as_of).rule

    def available(
        self, service_type: ServiceType | str, as_of: datetime
    ) -> dict[VehicleType, PricingRule]:
        """Per-vehicle view of the rules a quote for ``service_type`` would use."""
        service_type = _coerce(ServiceType, service_type, "service_type")
        result: dict[VehicleType, PricingRule] = {}
        with self._lock:
            for vehicle_type in VehicleType:
                entry = self._candidates(vehicle_type, service_type, as_of)
                if entry is not None:
                    result[vehicle_type] = entry.rule.model_copy(deep=True)
        return result
