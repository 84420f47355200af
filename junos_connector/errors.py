"""Exception hierarchy for the connector.

Device-level failures (JunOS answering with an error banner) are not
exceptions; they come back as a ``CommandResult`` with ``exit_code == 1``.
"""

from __future__ import annotations


class ConnectorError(Exception):
    """Base class for every error raised by the connector."""


class ConfigurationError(ConnectorError, ValueError):
    """Invalid or conflicting connection options."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")


class CommandRejectedError(ConnectorError):
    """A command failed sanitisation and was never sent."""

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"Invalid characters in command: {command!r}")


class TransportError(ConnectorError):
    """SSH connect or send/receive failure."""
