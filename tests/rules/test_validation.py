from datetime import datetime
from decimal import Decimal

import pytest

from fare_engine.core.exceptions import ConfigurationError
from fare_engine.rules.models import Hourly, TransferFlat, TransferTiered
from fare_engine.rules.validation import validate_rule
from tests.factories import hourly_rule, tiered_rule, transfer_rule


@pytest.mark.unit
class TestPricingModeResolution:
    def test_tiered_transfer(self):
        mode = validate_rule(tiered_rule())
        assert isinstance(mode, TransferTiered)
        assert len(mode.tiers) == 2
        assert mode.tiers[1].is_remaining

    def test_flat_transfer(self):
        mode = validate_rule(transfer_rule())
        assert isinstance(mode, TransferFlat)
        assert mode.base_rate == Decimal("50")
        assert mode.per_mile_rate == Decimal("2.50")

    def test_flat_transfer_with_base_rate_only(self):
        mode = validate_rule(transfer_rule(per_mile_rate=None))
        assert isinstance(mode, TransferFlat)
        assert mode.per_mile_rate == Decimal("0")

    def test_hourly(self):
        mode = validate_rule(hourly_rule(overtime_rate=Decimal("150")))
        assert isinstance(mode, Hourly)
        assert mode.minimum_hours == Decimal("2")
        assert mode.overtime_rate == Decimal("150")

    def test_mode_is_frozen(self):
        mode = validate_rule(transfer_rule())
        with pytest.raises(Exception):
            mode.base_rate = Decimal("1")


@pytest.mark.unit
class TestRuleValidationErrors:
    def test_transfer_without_any_rate(self):
        with pytest.raises(ConfigurationError, match="Transfer service requires"):
            validate_rule(transfer_rule(base_rate=None, per_mile_rate=None))

    def test_hourly_without_minimum_hours(self):
        with pytest.raises(ConfigurationError, match="minimumHours"):
            validate_rule(hourly_rule(minimum_hours=None))

    def test_remaining_tier_must_be_last(self):
        rule = tiered_rule(
            distance_tiers=[
                {"rate_per_mile": "3", "is_remaining": True},
                {"miles": "10", "rate_per_mile": "2"},
            ]
        )
        with pytest.raises(ConfigurationError, match="Remaining tier must be the last tier"):
            validate_rule(rule)

    def test_two_remaining_tiers(self):
        rule = tiered_rule(
            distance_tiers=[
                {"rate_per_mile": "3", "is_remaining": True},
                {"rate_per_mile": "2", "is_remaining": True},
            ]
        )
        with pytest.raises(ConfigurationError):
            validate_rule(rule)

    def test_zero_mile_tier(self):
        rule = tiered_rule(distance_tiers=[{"miles": "0", "rate_per_mile": "2"}])
        with pytest.raises(ConfigurationError, match="positive distance"):
            validate_rule(rule)

    def test_negative_tier_rate(self):
        rule = tiered_rule(distance_tiers=[{"miles": "5", "rate_per_mile": "-1"}])
        with pytest.raises(ConfigurationError, match="tier rate"):
            validate_rule(rule)

    def test_negative_scalar(self):
        with pytest.raises(ConfigurationError) as exc_info:
            validate_rule(transfer_rule(minimum_fare=Decimal("-5")))
        assert exc_info.value.details["field"] == "minimum_fare"
        assert exc_info.value.details["rule_id"] == "sedan-transfer"

    def test_gratuity_out_of_range(self):
        with pytest.raises(ConfigurationError):
            validate_rule(transfer_rule(gratuity_percent=Decimal("120")))

    def test_effective_end_before_start(self):
        rule = transfer_rule(
            effective_start=datetime(2026, 6, 1), effective_end=datetime(2026, 1, 1)
        )
        with pytest.raises(ConfigurationError, match="Effective end date"):
            validate_rule(rule)

    @pytest.mark.parametrize("multiplier", ["0.5", "6"])
    def test_surge_multiplier_bounds(self, multiplier):
        rule = transfer_rule(
            surge_windows=[
                {"day_of_week": 5, "start_time": "17:00", "end_time": "19:00", "multiplier": multiplier}
            ]
        )
        with pytest.raises(ConfigurationError, match="surge multiplier"):
            validate_rule(rule)

    def test_surge_day_out_of_range(self):
        rule = transfer_rule(
            surge_windows=[
                {"day_of_week": 7, "start_time": "17:00", "end_time": "19:00", "multiplier": "1.5"}
            ]
        )
        with pytest.raises(ConfigurationError, match="day_of_week"):
            validate_rule(rule)

    def test_negative_airport_fee(self):
        rule = transfer_rule(airport_fees=[{"airport_code": "jfk", "fee": "-10"}])
        with pytest.raises(ConfigurationError) as exc_info:
            validate_rule(rule)
        assert exc_info.value.details["airport"] == "JFK"

    def test_negative_miles_on_remaining_tier(self):
        rule = tiered_rule(
            distance_tiers=[
                {"miles": "20", "rate_per_mile": "0"},
                {"miles": "-5", "rate_per_mile": "4.45", "is_remaining": True},
            ]
        )
        with pytest.raises(ConfigurationError, match="tier miles") as exc_info:
            validate_rule(rule)
        assert exc_info.value.details["tier"] == 1

    def test_surge_multiplier_with_three_decimals(self):
        rule = transfer_rule(
            surge_windows=[
                {"day_of_week": 5, "start_time": "17:00", "end_time": "19:00", "multiplier": "1.255"}
            ]
        )
        with pytest.raises(ConfigurationError, match="two decimal places"):
            validate_rule(rule)
