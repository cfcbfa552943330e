from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from fare_engine.api.app import create_app
from fare_engine.pricing.collaborators import InMemoryCreditLedger, InMemoryPassengerDirectory
from fare_engine.pricing.models import PassengerDiscount
from fare_engine.settings import Settings


@pytest.fixture
def directory():
    directory = InMemoryPassengerDirectory()
    directory.set_discount("vip", PassengerDiscount(discount_type="percentage", discount_value="10"))
    return directory


@pytest.fixture
def ledger():
    ledger = InMemoryCreditLedger()
    ledger.top_up("vip", Decimal("30"))
    return ledger


@pytest.fixture
def test_client(catalog, directory, ledger):
    app = create_app(catalog, directory, ledger, settings=Settings())
    return TestClient(app)
