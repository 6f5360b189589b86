"""
Health check endpoints.

Provides liveness and readiness checks. Readiness requires the set list
and the eligibility rules to have been loaded.
"""

from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel

from pullvalue.services.set_catalog import get_sets

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    sets: int | None = None
    set_configs: int | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness check.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(request: Request, response: Response) -> HealthResponse:
    """
    Readiness check.

    Returns 503 if the set list is unavailable or the lookup service has
    not been started.
    """
    lookup = getattr(request.app.state, "lookup", None)
    try:
        sets = get_sets()
    except (FileNotFoundError, ValueError):
        sets = ()

    if lookup is None or not sets:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", sets=len(sets))

    return HealthResponse(status="ready", sets=len(sets), set_configs=len(lookup.rules.sets))
