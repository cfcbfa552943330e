from fastapi import APIRouter, status

from fare_engine.api.dependencies import AggregatorDep
from fare_engine.api.models.fares import ErrorResponse
from fare_engine.pricing.models import FareBreakdown, FareRequest

router = APIRouter()


@router.post(
    "/quote",
    response_model=FareBreakdown,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
def quote_fare(body: FareRequest, aggregator: AggregatorDep) -> FareBreakdown:
    """Price a trip request and return the itemized breakdown.

    Engine errors are mapped to HTTP responses by the handlers registered
    in ``create_app``.
    """
    return aggregator.compute(body)
