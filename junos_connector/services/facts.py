"""Best-effort JunOS version / architecture detection."""

from __future__ import annotations

from typing import Any, Callable, Optional

from junos_connector.constants import IDENTIFY_COMMAND
from junos_connector.models.commands import CommandResult
from junos_connector.models.facts import DeviceFacts
from junos_connector.utils.junos_parser import extract_architecture, extract_version
from junos_connector.utils.logging import get_logger


class FactDetector:
    """Runs ``show version`` at most once and memoises what it finds.

    ``None`` means "not attempted yet"; ``DeviceFacts.unknown()`` means
    "attempted and found nothing" and is cached like any other answer.
    """

    def __init__(
        self,
        run: Callable[[str], CommandResult],
        is_connected: Callable[[], bool],
        *,
        simulated: bool = False,
        enabled: bool = True,
        logger: Any = None,
    ) -> None:
        self._run = run
        self._is_connected = is_connected
        self._simulated = simulated
        self._enabled = enabled
        self._log = logger or get_logger(__name__)
        self._facts: Optional[DeviceFacts] = None
        self._raw_output: Optional[str] = None

    @property
    def raw_output(self) -> Optional[str]:
        """Cached output of the identification command, if it succeeded."""
        return self._raw_output

    def detect(self) -> DeviceFacts:
        if self._facts is None:
            self._facts = self._detect()
        return self._facts

    def _detect(self) -> DeviceFacts:
        if self._simulated and not self._enabled:
            self._log.debug("facts.skipped", reason="detection disabled")
            return DeviceFacts.unknown()
        if not self._is_connected():
            self._log.debug("facts.skipped", reason="not connected")
            return DeviceFacts.unknown()

        try:
            result = self._run(IDENTIFY_COMMAND)
        except Exception as exc:
            self._log.debug("facts.failed", error=str(exc))
            return DeviceFacts.unknown()
        if result.failed:
            self._log.debug("facts.failed", error=result.stderr)
            return DeviceFacts.unknown()

        self._raw_output = result.stdout
        facts = DeviceFacts(
            version=extract_version(result.stdout),
            architecture=extract_architecture(result.stdout),
        )
        if not facts.known:
            self._log.debug("facts.unparsed", output=result.stdout[:100])
        self._log.info(
            "facts.detected", version=facts.version, architecture=facts.architecture,
        )
        return facts
