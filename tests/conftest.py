import pytest

from fare_engine.rules.catalog import RuleCatalog
from tests.factories import hourly_rule, tiered_rule, transfer_rule


@pytest.fixture
def catalog() -> RuleCatalog:
    """Catalog with one flat transfer, one tiered transfer and one hourly rule."""
    return RuleCatalog([transfer_rule(), tiered_rule(), hourly_rule()])


@pytest.fixture
def empty_catalog() -> RuleCatalog:
    return RuleCatalog()
