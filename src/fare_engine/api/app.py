"""FastAPI application factory for the fare quote service."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fare_engine.api.models.health import HealthResponse
from fare_engine.api.routes import fares, rules
from fare_engine.core.exceptions import (
    ConfigurationError,
    FareEngineError,
    InvalidLocationError,
    InvalidRequestError,
    NoApplicableRuleError,
)
from fare_engine.pricing.aggregator import FareAggregator
from fare_engine.pricing.collaborators import CreditBalanceLookup, PassengerProfileLookup
from fare_engine.rules.catalog import RuleCatalog
from fare_engine.settings import Settings, get_settings

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[FareEngineError], int, str]] = [
    (NoApplicableRuleError, status.HTTP_404_NOT_FOUND, "pricing unavailable"),
    (InvalidLocationError, status.HTTP_400_BAD_REQUEST, "invalid location"),
    (InvalidRequestError, status.HTTP_400_BAD_REQUEST, "invalid request"),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR, "pricing configuration fault"),
]


async def fare_engine_error_handler(request: Request, exc: FareEngineError) -> JSONResponse:
    for error_type, status_code, label in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            break
    else:
        status_code, label = status.HTTP_500_INTERNAL_SERVER_ERROR, "pricing error"

    return JSONResponse(
        status_code=status_code,
        content={"message": exc.message, "error": label, "details": exc.details},
    )


def create_app(
    catalog: RuleCatalog,
    passenger_profiles: PassengerProfileLookup | None = None,
    credit_balances: CreditBalanceLookup | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create FastAPI application with injected dependencies.

    Args:
        catalog: RuleCatalog holding the active pricing rules
        passenger_profiles: Lookup for passenger discounts (optional)
        credit_balances: Lookup for account-credit balances (optional)
        settings: Settings instance; loaded from the environment when omitted
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Fare Engine API",
        description="Itemized fare quotes for ground-transportation bookings",
        version="0.1.0",
    )

    app.state.catalog = catalog
    app.state.aggregator = FareAggregator(
        catalog,
        passenger_profiles,
        credit_balances,
        distance_precision=settings.pricing.distance_precision,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.origin_list(),
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_exception_handler(FareEngineError, fare_engine_error_handler)

    app.include_router(fares.router, prefix="/fares", tags=["fares"])
    app.include_router(rules.router, prefix="/pricing-rules", tags=["pricing-rules"])

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        rule_count = len(catalog)
        return HealthResponse(
            status="healthy" if rule_count else "degraded",
            rule_count=rule_count,
            timestamp=datetime.now(UTC).isoformat(),
        )

    logger.info("Fare API created with %d pricing rules", len(catalog))
    return app
