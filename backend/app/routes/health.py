"""
DogAdopt Backend — Health Check & Index Routes
================================================

What:  GET /health for monitoring and load balancer probes, and GET / as a
       small index of the API.
How:   /health pings the database through the `Database` handle on
       app.state and reports an aggregate status.

Status levels:
    - healthy:   database reachable (HTTP 200)
    - unhealthy: database unreachable (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app import __version__
from app.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(request: Request):
    """
    Check the health of the service and its database.

    The probe is a `SELECT 1`, cheap enough to run every few seconds.
    """
    settings = request.app.state.settings
    reachable = await request.app.state.database.ping()

    health = HealthResponse(
        status="healthy" if reachable else "unhealthy",
        version=__version__,
        environment=settings.environment,
        database="connected" if reachable else "disconnected",
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if not reachable:
        logger.warning("Health check: database unreachable")
        return JSONResponse(status_code=503, content=health.model_dump())
    return health


@router.get("/", summary="API index", include_in_schema=False)
async def index() -> dict:
    return {
        "success": True,
        "message": "Welcome to the DogAdopt API",
        "version": __version__,
        "endpoints": {
            "health": "GET /health",
            "register": "POST /api/auth/register",
            "login": "POST /api/auth/login",
            "list_dogs": "GET /api/dogs",
            "get_dog": "GET /api/dogs/{id}",
            "register_dog": "POST /api/dogs",
            "adopt_dog": "PUT /api/dogs/{id}/adopt",
            "remove_dog": "DELETE /api/dogs/{id}",
            "my_registered_dogs": "GET /api/dogs/registered",
            "my_adopted_dogs": "GET /api/dogs/adopted",
        },
    }
