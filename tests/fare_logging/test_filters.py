import json
import logging

import pytest

from fare_engine.fare_logging import (
    DefaultCorrelationFilter,
    DevFormatter,
    JSONFormatter,
    PIIFilter,
)


def make_record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="fare_engine.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.mark.unit
class TestPIIFilter:
    def test_masks_email(self):
        record = make_record("Quote for jane.doe@example.com")
        PIIFilter().filter(record)
        assert record.msg == "Quote for [EMAIL]"

    def test_masks_phone(self):
        record = make_record("Call 555-123-4567 on arrival")
        PIIFilter().filter(record)
        assert record.msg == "Call [PHONE] on arrival"

    def test_leaves_amounts_alone(self):
        record = make_record("Total 125.00 after 10% discount")
        PIIFilter().filter(record)
        assert record.msg == "Total 125.00 after 10% discount"


@pytest.mark.unit
class TestDefaultCorrelationFilter:
    def test_adds_default(self):
        record = make_record("msg")
        DefaultCorrelationFilter().filter(record)
        assert record.correlation_id == "-"

    def test_keeps_existing(self):
        record = make_record("msg", correlation_id="q-1")
        DefaultCorrelationFilter().filter(record)
        assert record.correlation_id == "q-1"


@pytest.mark.unit
class TestFormatters:
    def test_json_includes_context_fields(self):
        record = make_record("priced", quote_id="q-1", rule_id="r-1")
        data = json.loads(JSONFormatter(environment="test").format(record))

        assert data["message"] == "priced"
        assert data["level"] == "INFO"
        assert data["env"] == "test"
        assert data["quote_id"] == "q-1"
        assert data["rule_id"] == "r-1"
        assert "passenger_id" not in data

    def test_dev_format_shows_correlation(self):
        record = make_record("priced", correlation_id="q-7")
        assert "[corr=q-7]" in DevFormatter().format(record)
