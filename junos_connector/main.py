"""FastAPI application entry-point."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from junos_connector import __version__
from junos_connector.config import settings
from junos_connector.routers import facts, health, show
from junos_connector.services import device as device_mod
from junos_connector.utils.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown hooks."""
    setup_logging(settings.log_level, settings.log_json)
    yield
    # Shutdown: close SSH session
    await device_mod.device_service.close()


app = FastAPI(
    title="JunOS Connector",
    description="SSH command execution and fact detection for Juniper JunOS devices",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(show.router)
app.include_router(facts.router)
