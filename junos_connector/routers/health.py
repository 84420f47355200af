"""Health-check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from junos_connector import __version__
from junos_connector.auth import require_api_key
from junos_connector.errors import ConnectorError
from junos_connector.models.responses import DeviceHealthResponse, HealthResponse
from junos_connector.services import device as device_mod

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def service_health() -> HealthResponse:
    """Basic liveness probe (no auth required)."""
    return HealthResponse(status="ok", version=__version__)


@router.get(
    "/device/health",
    response_model=DeviceHealthResponse,
    dependencies=[Depends(require_api_key)],
)
async def device_health() -> DeviceHealthResponse:
    """Check that the device answers ``show version``."""
    try:
        healthy, uri = await device_mod.device_service.health()
    except ConnectorError as exc:
        return DeviceHealthResponse(reachable=False, uri="", error=str(exc))
    return DeviceHealthResponse(
        reachable=healthy,
        uri=uri,
        error=None if healthy else "device did not answer show version",
    )
