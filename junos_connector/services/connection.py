"""Connection to one Juniper device.

Wires option validation, the SSH session, command execution and fact
detection together behind the interface the host framework consumes.
Not thread-safe: use one instance per device per thread.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

import paramiko

from junos_connector import __version__
from junos_connector.config import Settings, merge_environment
from junos_connector.constants import (
    DOWNLOAD_NOT_SUPPORTED,
    IDENTIFY_COMMAND,
    INVENTORY_XML_COMMAND,
    PLATFORM_NAME,
    UPLOAD_NOT_SUPPORTED,
)
from junos_connector.models.commands import CommandResult
from junos_connector.models.facts import DeviceFacts, PlatformInfo
from junos_connector.models.options import ConnectionOptions, validate_options
from junos_connector.services.executor import CommandExecutor
from junos_connector.services.facts import FactDetector
from junos_connector.services.files import JunosFile
from junos_connector.services.proxy import ProxyPlan, jump_host_string
from junos_connector.services.session import SessionManager
from junos_connector.utils.junos_parser import extract_chassis_serial
from junos_connector.utils.logging import get_logger


class JunosConnection:
    """SSH connection to a JunOS device, direct or through a bastion."""

    def __init__(
        self,
        options: Mapping[str, Any],
        *,
        logger: Any = None,
        settings: Settings | None = None,
        client_factory: Callable[[], Any] = paramiko.SSHClient,
    ) -> None:
        self._log = logger or get_logger(__name__)
        self.options: ConnectionOptions = validate_options(
            merge_environment(options, settings),
        )
        self._log.debug("connection.init", options=self.options.safe_dump())

        self.session = SessionManager(
            self.options, logger=self._log, client_factory=client_factory,
        )
        self.executor = CommandExecutor(self.options, self.session, logger=self._log)
        self.facts = FactDetector(
            self.execute,
            lambda: self.connected,
            simulated=self.options.simulated,
            enabled=self.options.fact_detection,
            logger=self._log,
        )
        self._platform: Optional[PlatformInfo] = None

        if self.options.simulated:
            self._log.info("connection.simulated", host=self.options.host)
        elif not self.options.skip_connect:
            self.connect()

    # ── lifecycle ─────────────────────────────────────────────────────

    def connect(self) -> None:
        self.session.connect()

    @property
    def connected(self) -> bool:
        return self.session.connected

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "JunosConnection":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ── commands ──────────────────────────────────────────────────────

    def execute(self, command: str) -> CommandResult:
        return self.executor.execute(command)

    def healthy(self) -> bool:
        """True when the device answers ``show version`` successfully."""
        if not self.connected:
            return False
        if not self.options.simulated and not self.session.is_alive():
            return False
        try:
            return not self.execute(IDENTIFY_COMMAND).failed
        except Exception as exc:
            self._log.debug("connection.health_failed", error=str(exc))
            return False

    # ── platform ──────────────────────────────────────────────────────

    def detect_facts(self) -> DeviceFacts:
        return self.facts.detect()

    def platform(self) -> PlatformInfo:
        if self._platform is None:
            facts = self.detect_facts()
            self._platform = PlatformInfo(
                release=facts.version or __version__,
                arch=facts.architecture or "unknown",
            )
            self._log.info(
                "platform.detected",
                name=self._platform.name,
                release=self._platform.release,
                arch=self._platform.arch,
            )
        return self._platform

    def unique_identifier(self) -> str:
        """Chassis serial number, or the host name when it cannot be read."""
        if not self.connected:
            return self.options.host
        try:
            result = self.execute(INVENTORY_XML_COMMAND)
        except Exception as exc:
            self._log.debug("connection.serial_failed", error=str(exc))
            return self.options.host
        if result.failed:
            return self.options.host
        return extract_chassis_serial(result.stdout) or self.options.host

    # ── addressing ────────────────────────────────────────────────────

    @property
    def proxy_plan(self) -> ProxyPlan:
        return self.session.proxy_plan

    @property
    def uri(self) -> str:
        opts = self.options
        base = f"{PLATFORM_NAME}://{opts.user}@{opts.host}:{opts.port}"
        if not opts.bastion_host:
            return base
        return (
            f"{base}?via={opts.effective_bastion_user}"
            f"@{opts.bastion_host}:{opts.bastion_port}"
        )

    @property
    def jump_host(self) -> Optional[str]:
        opts = self.options
        if not opts.bastion_host:
            return None
        return jump_host_string(
            opts.effective_bastion_user, opts.bastion_host, opts.bastion_port,
        )

    # ── files ─────────────────────────────────────────────────────────

    def file(self, path: str) -> JunosFile:
        return JunosFile(self, path)

    def upload(self, locals: Any, remote: str) -> None:
        raise NotImplementedError(UPLOAD_NOT_SUPPORTED)

    def download(self, remotes: Any, local: str) -> None:
        raise NotImplementedError(DOWNLOAD_NOT_SUPPORTED)

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} host={self.options.host} "
            f"user={self.options.user}>"
        )

    __str__ = __repr__
