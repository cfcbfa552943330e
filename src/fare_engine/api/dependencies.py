"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Request

from fare_engine.pricing.aggregator import FareAggregator
from fare_engine.rules.catalog import RuleCatalog


def get_aggregator(request: Request) -> FareAggregator:
    """Retrieve FareAggregator from app state."""
    return request.app.state.aggregator


def get_catalog(request: Request) -> RuleCatalog:
    """Retrieve RuleCatalog from app state."""
    return request.app.state.catalog


AggregatorDep = Annotated[FareAggregator, Depends(get_aggregator)]
CatalogDep = Annotated[RuleCatalog, Depends(get_catalog)]
