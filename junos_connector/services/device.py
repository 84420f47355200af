"""Async access to the configured device for the HTTP API.

The connector is blocking, so every call runs inside a single-thread
executor behind an ``asyncio.Lock`` and the event loop is never blocked.
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

from junos_connector.config import Settings, settings
from junos_connector.models.commands import CommandResult
from junos_connector.models.facts import PlatformInfo
from junos_connector.services.connection import JunosConnection
from junos_connector.utils.logging import get_logger

log = get_logger(__name__)


class DeviceService:
    """Owns the one ``JunosConnection`` configured through ``JUNIPER_*``."""

    def __init__(self, cfg: Settings | None = None) -> None:
        self._cfg = cfg or settings
        self._connection: Optional[JunosConnection] = None
        self._lock = asyncio.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ssh")

    # ── connection lifecycle ──────────────────────────────────────────

    def _build_options(self) -> dict[str, Any]:
        options = self._cfg.connection_overrides()
        options["simulated"] = self._cfg.simulated
        return options

    def _open_sync(self) -> JunosConnection:
        log.info("device.connecting", host=self._cfg.host)
        # Options already carry the environment overrides
        return JunosConnection(self._build_options(), settings=self._cfg)

    def _close_sync(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            log.info("device.closed")

    async def _ensure(self) -> JunosConnection:
        if self._connection is None:
            self._connection = await self._run(self._open_sync)
        return self._connection

    async def _run(self, fn, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, fn, *args)

    # ── public ────────────────────────────────────────────────────────

    async def execute(self, command: str) -> CommandResult:
        async with self._lock:
            connection = await self._ensure()
            return await self._run(connection.execute, command)

    async def facts(self) -> tuple[PlatformInfo, str]:
        """Platform description and unique identifier of the device."""
        async with self._lock:
            connection = await self._ensure()
            platform = await self._run(connection.platform)
            serial = await self._run(connection.unique_identifier)
            return platform, serial

    async def health(self) -> tuple[bool, str]:
        """``(healthy, uri)`` for the configured device."""
        async with self._lock:
            connection = await self._ensure()
            healthy = await self._run(connection.healthy)
            return healthy, connection.uri

    async def close(self) -> None:
        async with self._lock:
            await self._run(self._close_sync)

    @property
    def is_connected(self) -> bool:
        return self._connection is not None and self._connection.connected


# ── Singleton instance ────────────────────────────────────────────────────

device_service = DeviceService()
