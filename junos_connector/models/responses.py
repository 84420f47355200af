"""HTTP API request/response models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    version: str


class DeviceHealthResponse(BaseModel):
    reachable: bool
    uri: str
    error: Optional[str] = None


class ShowCommandRequest(BaseModel):
    command: str


class ShowCommandResponse(BaseModel):
    command: str
    stdout: str
    stderr: str
    exit_code: int
    success: bool


class FactsResponse(BaseModel):
    name: str
    title: str
    family: str
    release: str
    arch: str
    serial: str


class ErrorResponse(BaseModel):
    detail: str
