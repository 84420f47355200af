"""Device platform facts endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from junos_connector.auth import require_api_key
from junos_connector.errors import ConnectorError
from junos_connector.models.responses import ErrorResponse, FactsResponse
from junos_connector.services import device as device_mod

router = APIRouter(tags=["facts"], dependencies=[Depends(require_api_key)])


@router.get(
    "/facts",
    response_model=FactsResponse,
    responses={502: {"model": ErrorResponse}},
)
async def device_facts() -> FactsResponse:
    try:
        platform, serial = await device_mod.device_service.facts()
    except ConnectorError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return FactsResponse(**platform.model_dump(), serial=serial)
