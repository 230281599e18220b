"""
Health Check Endpoints.

This module provides system status endpoints (health, version) used for
monitoring and deployment verification.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from devtracker import __version__
from devtracker.core.database import check_database, get_session
from devtracker.core.logging_config import get_logger
from devtracker.server.core import constant
from devtracker.server.services.deps import RedisClientDep

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/actuator/health",
    summary="Health Check",
    description="Check the API server and its database and Redis connections.",
    response_description="Overall status with one entry per component.",
    responses={503: {"description": "At least one component is down."}},
)
async def health_check(session: Annotated[AsyncSession, Depends(get_session)], redis: RedisClientDep):
    """
    Health check endpoint.

    Returns ``UP`` when every component answers, otherwise ``DOWN`` with
    HTTP 503 and the failing component marked.
    """
    components = {}
    try:
        await check_database(session)
        components["db"] = {"status": "UP"}
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        components["db"] = {"status": "DOWN", "error": type(e).__name__}

    try:
        await redis.ping()
        components["redis"] = {"status": "UP"}
    except Exception as e:
        logger.warning(f"Redis health check failed: {e}")
        components["redis"] = {"status": "DOWN", "error": type(e).__name__}

    up = all(c["status"] == "UP" for c in components.values())
    return JSONResponse(
        status_code=200 if up else 503,
        content={"status": "UP" if up else "DOWN", "components": components},
    )


@router.get(
    "/version",
    summary="Get Version",
    description="Retrieve version information for the API server.",
    response_description="Version object.",
)
async def version():
    return {"version": __version__, "api_version": constant.API_VERSION}
