"""Configuration and operational data exposed as read-only pseudo-files."""

from __future__ import annotations

from typing import TYPE_CHECKING

from junos_connector.constants import (
    CONFIG_PATH_PATTERN,
    DOWNLOAD_NOT_SUPPORTED,
    OPERATIONAL_PATH_PATTERN,
    UPLOAD_NOT_SUPPORTED,
)
from junos_connector.errors import ConnectorError

if TYPE_CHECKING:
    from junos_connector.services.connection import JunosConnection


def command_for_path(path: str) -> str:
    """``/config/x`` → ``show configuration x``, ``/operational/x`` → ``show x``."""
    m = CONFIG_PATH_PATTERN.match(path)
    if m:
        return f"show configuration {m.group(1)}".rstrip()
    m = OPERATIONAL_PATH_PATTERN.match(path)
    if m:
        return f"show {m.group(1)}".rstrip()
    return f"show {path}".rstrip()


class JunosFile:
    def __init__(self, connection: JunosConnection, path: str) -> None:
        self._connection = connection
        self.path = path

    @property
    def command(self) -> str:
        return command_for_path(self.path)

    @property
    def content(self) -> str:
        return self._connection.execute(self.command).stdout

    def exists(self) -> bool:
        """True when the backing command succeeds with some output."""
        try:
            result = self._connection.execute(self.command)
        except ConnectorError:
            return False
        return not result.failed and bool(result.stdout)

    def upload(self, _content: str) -> None:
        raise NotImplementedError(UPLOAD_NOT_SUPPORTED)

    def download(self, _local_path: str) -> None:
        raise NotImplementedError(DOWNLOAD_NOT_SUPPORTED)

    def __str__(self) -> str:
        return self.path

    def __repr__(self) -> str:
        return f"<JunosFile {self.path}>"
