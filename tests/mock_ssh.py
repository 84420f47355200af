"""Fake paramiko client for testing without a real device.

Provides canned JunOS outputs so that session, executor and fact
detection flows can be exercised end to end.
"""

from __future__ import annotations

import io
from typing import Optional

import paramiko

from junos_connector.models.commands import CommandResult

# ── Canned JunOS outputs ──────────────────────────────────────────────────

SHOW_VERSION = """\
Hostname: core-mx
Model: mx480
Junos: 21.4R3-S4.9
JUNOS OS Kernel 64-bit  [20230208.f5c6d02_builder_stable_12_214]
JUNOS OS libs [20230208.f5c6d02_builder_stable_12_214]
JUNOS Routing Software Suite [21.4R3-S4.9]
"""

SHOW_VERSION_EX = """\
Hostname: access-sw1
Model: ex4300-48t
Junos: 20.2R3.9
"""

SHOW_VERSION_UNPARSEABLE = "Hostname: mystery\n"

SHOW_CHASSIS_HARDWARE_XML = """\
<rpc-reply>
  <chassis-inventory>
    <chassis>
      <name>Chassis</name>
      <serial-number>JN11F00AAAFB</serial-number>
      <description>MX480</description>
    </chassis>
  </chassis-inventory>
</rpc-reply>
"""

SHOW_SYSTEM_UPTIME = "Current time: 2024-05-01 10:00:00 UTC\n"

SYNTAX_ERROR = """\
show bogus
             ^
syntax error, expecting <command>.
"""

_CANNED: dict[str, str] = {
    "show version": SHOW_VERSION,
    "show chassis hardware | display xml": SHOW_CHASSIS_HARDWARE_XML,
    "show system uptime": SHOW_SYSTEM_UPTIME,
    "set cli screen-length 0": "Screen length set to 0\n",
    "set cli screen-width 0": "Screen width set to 0\n",
    "set cli complete-on-space off": "Disabling complete-on-space\n",
}


# ── Fake paramiko pieces ──────────────────────────────────────────────────


class FakeStream(io.BytesIO):
    """Stands in for the ChannelFile objects ``exec_command`` returns."""


class FakeTransport:
    def __init__(self) -> None:
        self.keepalive: Optional[int] = None
        self.active = True

    def set_keepalive(self, interval: int) -> None:
        self.keepalive = interval

    def is_active(self) -> bool:
        return self.active


class FakeSSHClient:
    """Drop-in replacement for ``paramiko.SSHClient`` using canned outputs."""

    def __init__(
        self,
        *,
        connect_error: Optional[BaseException] = None,
        exec_error: Optional[BaseException] = None,
        fail_on: Optional[str] = None,
        on_connect=None,
    ) -> None:
        self.connect_error = connect_error
        self.exec_error = exec_error
        self.fail_on = fail_on
        self.on_connect = on_connect
        self.connect_kwargs: dict = {}
        self.policy = None
        self.sent_commands: list[str] = []
        self.closed = False
        self.transport = FakeTransport()
        self._extra: dict[str, str] = {}

    def add_response(self, command: str, output: str) -> None:
        """Add or override a canned response."""
        self._extra[command] = output

    def _lookup(self, command: str) -> str:
        if command in self._extra:
            return self._extra[command]
        if command in _CANNED:
            return _CANNED[command]
        return SYNTAX_ERROR

    # paramiko.SSHClient interface

    def set_missing_host_key_policy(self, policy) -> None:
        self.policy = policy

    def connect(self, **kwargs) -> None:
        self.connect_kwargs = kwargs
        if self.on_connect is not None:
            self.on_connect(kwargs)
        if self.connect_error is not None:
            raise self.connect_error

    def exec_command(self, command: str, timeout=None):
        self.sent_commands.append(command)
        if self.exec_error is not None or command == self.fail_on:
            raise self.exec_error or paramiko.SSHException("channel closed")
        output = self._lookup(command)
        return FakeStream(), FakeStream(output.encode()), FakeStream(b"")

    def get_transport(self) -> FakeTransport:
        return self.transport

    def close(self) -> None:
        self.closed = True
        self.transport.active = False


class FakeProxy:
    """Stands in for the proxy child process handed to paramiko as ``sock``."""

    def __init__(self, command: str, env: Optional[dict] = None) -> None:
        self.command = command
        self.env = env
        self.closed = False

    def close(self) -> None:
        self.closed = True


def client_factory(client: FakeSSHClient):
    """Factory usable as ``client_factory=`` that always hands out *client*."""
    return lambda: client


# ── Mock device service ───────────────────────────────────────────────────


class MockDeviceService:
    """Drop-in replacement for DeviceService that never opens a socket."""

    def __init__(self, connection) -> None:
        self.connection = connection
        self.closed = False

    async def execute(self, command: str) -> CommandResult:
        return self.connection.execute(command)

    async def facts(self):
        return self.connection.platform(), self.connection.unique_identifier()

    async def health(self):
        return self.connection.healthy(), self.connection.uri

    async def close(self) -> None:
        self.closed = True
