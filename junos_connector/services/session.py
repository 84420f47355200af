"""SSH session to a single JunOS device.

One paramiko client per manager, opened on demand, optionally tunnelled
through a proxy plan.  Every command runs on its own exec channel.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Optional

import paramiko

from junos_connector.constants import (
    CLI_TUNING_COMMANDS,
    COMPLETE_ON_SPACE_OFF,
    PROBE_COMMAND,
)
from junos_connector.errors import TransportError
from junos_connector.models.options import ConnectionOptions
from junos_connector.services.proxy import ProxyPlan, open_proxy, select_proxy_plan
from junos_connector.utils.junos_parser import connection_error_message
from junos_connector.utils.logging import get_logger, redact_mapping

# Errors raised by the network layer while connecting or talking to the device
TRANSPORT_EXCEPTIONS: tuple[type[BaseException], ...] = (
    paramiko.SSHException,
    OSError,
    EOFError,
)
CONNECT_EXCEPTIONS = (TransportError, *TRANSPORT_EXCEPTIONS)


class SessionState(str, Enum):
    disconnected = "disconnected"
    connecting = "connecting"
    connected = "connected"


class SessionManager:
    """Owns the one SSH session of a connection."""

    def __init__(
        self,
        options: ConnectionOptions,
        *,
        logger: Any = None,
        client_factory: Callable[[], Any] = paramiko.SSHClient,
    ) -> None:
        self._opts = options
        self._log = logger or get_logger(__name__)
        self._client_factory = client_factory
        self._client: Optional[Any] = None
        self.state = SessionState.disconnected

    # ── connection lifecycle ──────────────────────────────────────────

    @property
    def proxy_plan(self) -> ProxyPlan:
        return select_proxy_plan(self._opts)

    def build_connect_kwargs(self) -> dict[str, Any]:
        opts = self._opts
        kwargs: dict[str, Any] = dict(
            hostname=opts.host,
            port=opts.port,
            username=opts.user,
            timeout=opts.timeout,
            banner_timeout=opts.timeout,
            auth_timeout=opts.timeout,
        )
        if opts.password is not None:
            kwargs["password"] = opts.password.get_secret_value()
        if opts.key_files:
            kwargs["key_filename"] = list(opts.key_files)
            if opts.keys_only:
                kwargs["look_for_keys"] = False
                kwargs["allow_agent"] = False
        return kwargs

    def connect(self) -> None:
        """Open the session; a no-op when already connected."""
        if self.connected:
            return

        self.state = SessionState.connecting
        plan = self.proxy_plan
        kwargs = self.build_connect_kwargs()
        if plan.kind != "none":
            self._log.debug(
                "ssh.proxy", kind=plan.kind, jump_host=getattr(plan, "jump_host", None),
            )
        self._log.debug(
            "ssh.connecting",
            host=self._opts.host,
            port=self._opts.port,
            options=redact_mapping(kwargs),
        )

        client = self._client_factory()
        sock = None
        try:
            # Host keys are never verified
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
            with open_proxy(plan, self._opts.host, self._opts.port) as sock:
                if sock is not None:
                    kwargs["sock"] = sock
                client.connect(**kwargs)
            if self._opts.keepalive:
                transport = client.get_transport()
                if transport is not None:
                    transport.set_keepalive(self._opts.keepalive_interval)
        except CONNECT_EXCEPTIONS as exc:
            self._fail(client, sock)
            self._log.error("ssh.connect_failed", host=self._opts.host, error=str(exc))
            raise TransportError(connection_error_message(str(exc), self._opts)) from exc

        self._client = client
        self.state = SessionState.connected
        self._log.info("ssh.connected", host=self._opts.host)
        self._test_and_configure()

    def _fail(self, client: Any, sock: Any = None) -> None:
        try:
            client.close()
        except TRANSPORT_EXCEPTIONS:
            pass
        # The proxy child outlives a connect that failed before the handshake
        if sock is not None:
            try:
                sock.close()
            except TRANSPORT_EXCEPTIONS:
                pass
        self.state = SessionState.disconnected

    def _test_and_configure(self) -> None:
        """Probe the session, then make the CLI automation friendly."""
        commands = [PROBE_COMMAND, *CLI_TUNING_COMMANDS]
        if self._opts.disable_complete_on_space:
            commands.append(COMPLETE_ON_SPACE_OFF)
        try:
            for command in commands:
                self.run(command)
            self._log.debug("ssh.session_configured")
        except TRANSPORT_EXCEPTIONS as exc:
            self._log.warning("ssh.configure_failed", error=str(exc))

    @property
    def connected(self) -> bool:
        if self._opts.simulated:
            return True
        return self._client is not None

    def is_alive(self) -> bool:
        """True when the underlying transport still reports itself active."""
        if self._client is None:
            return False
        transport = self._client.get_transport()
        return bool(transport is not None and transport.is_active())

    # ── commands ──────────────────────────────────────────────────────

    def run(self, command: str) -> str:
        """Send *command* on a fresh exec channel; return stdout + stderr."""
        if self._client is None:
            raise TransportError("SSH session is not connected")
        _stdin, stdout, stderr = self._client.exec_command(
            command, timeout=self._opts.timeout,
        )
        out = stdout.read().decode("utf-8", errors="replace")
        err = stderr.read().decode("utf-8", errors="replace")
        return out + err

    def close(self) -> None:
        if self._client is not None:
            try:
                self._client.close()
            except TRANSPORT_EXCEPTIONS:
                pass
            self._client = None
            self._log.info("ssh.closed", host=self._opts.host)
        self.state = SessionState.disconnected
