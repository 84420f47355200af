"""Command sanitisation, dispatch and output normalisation."""

from __future__ import annotations

import re
from typing import Any

from junos_connector.constants import PROMPT_ONLY_LINE
from junos_connector.errors import CommandRejectedError
from junos_connector.models.commands import CommandResult
from junos_connector.models.options import ConnectionOptions
from junos_connector.services import simulator
from junos_connector.services.session import CONNECT_EXCEPTIONS, SessionManager
from junos_connector.utils.junos_parser import detect_junos_error
from junos_connector.utils.logging import get_logger

# ── Command sanitisation ──────────────────────────────────────────────────
# The pipe stays allowed: JunOS uses it for output filters (``| match``).
DANGEROUS_COMMAND_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"[;&<>$`]"),
    re.compile(r"[\n\r]"),
    re.compile(r"\\(?![nrt])"),
]


def sanitize_command(command: str) -> str:
    """Return the stripped command or raise ``CommandRejectedError``."""
    cmd = str(command)
    for pat in DANGEROUS_COMMAND_PATTERNS:
        if pat.search(cmd):
            raise CommandRejectedError(cmd)
    return cmd.strip()


def clean_output(output: str | None, command: str) -> str:
    """Drop echoed command lines and trailing prompt-only lines.

    Text with neither comes back unchanged, final newline included.
    """
    if not output:
        return ""
    target = command.strip()
    lines = output.split("\n")
    trailing_newline = lines[-1] == ""
    if trailing_newline:
        lines.pop()
    if target:
        lines = [line for line in lines if line.strip() != target]
    while lines and PROMPT_ONLY_LINE.match(lines[-1].strip()):
        lines.pop()
    if not lines:
        return ""
    return "\n".join(lines) + ("\n" if trailing_newline else "")


def format_result(output: str | None, command: str) -> CommandResult:
    """Turn raw device output into a result; JunOS error banners fail it."""
    if detect_junos_error(output):
        return CommandResult(stdout="", stderr=output or "", exit_code=1)
    return CommandResult(stdout=clean_output(output, command), exit_code=0)


class CommandExecutor:
    """Runs commands against a session (or the simulator)."""

    def __init__(
        self,
        options: ConnectionOptions,
        session: SessionManager,
        *,
        logger: Any = None,
    ) -> None:
        self._opts = options
        self._session = session
        self._log = logger or get_logger(__name__)

    def execute(self, command: str) -> CommandResult:
        safe_cmd = sanitize_command(command)

        if self._opts.simulated:
            return simulator.response_for(safe_cmd)

        try:
            self._session.connect()
            self._log.debug("command.executing", command=safe_cmd)
            output = self._session.run(safe_cmd)
        except CONNECT_EXCEPTIONS as exc:
            self._log.error("command.failed", command=safe_cmd, error=str(exc))
            return CommandResult(stdout="", stderr=str(exc), exit_code=1)

        self._log.debug("command.output", command=safe_cmd, output=output)
        return format_result(output, safe_cmd)
