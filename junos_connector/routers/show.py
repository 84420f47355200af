"""Operational command endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from junos_connector.auth import require_api_key
from junos_connector.errors import CommandRejectedError, ConnectorError
from junos_connector.models.responses import (
    ErrorResponse,
    ShowCommandRequest,
    ShowCommandResponse,
)
from junos_connector.services import device as device_mod

router = APIRouter(tags=["show"], dependencies=[Depends(require_api_key)])


@router.post(
    "/show",
    response_model=ShowCommandResponse,
    responses={400: {"model": ErrorResponse}},
)
async def run_show_command(req: ShowCommandRequest) -> ShowCommandResponse:
    """Run a CLI command on the device."""
    try:
        result = await device_mod.device_service.execute(req.command)
    except CommandRejectedError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ConnectorError as exc:
        return ShowCommandResponse(
            command=req.command,
            stdout="",
            stderr=str(exc),
            exit_code=1,
            success=False,
        )
    return ShowCommandResponse(
        command=req.command,
        stdout=result.stdout,
        stderr=result.stderr,
        exit_code=result.exit_code,
        success=not result.failed,
    )
