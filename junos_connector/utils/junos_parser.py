"""Utilities for classifying and parsing JunOS CLI output."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from junos_connector.constants import BASTION_DOCS_POINTER

if TYPE_CHECKING:
    from junos_connector.models.options import ConnectionOptions


# ---------------------------------------------------------------------------
# Error detection
# ---------------------------------------------------------------------------

JUNOS_ERRORS: dict[str, list[re.Pattern[str]]] = {
    "configuration": [
        re.compile(r"^error:", re.IGNORECASE | re.MULTILINE),
        re.compile(r"configuration database locked", re.IGNORECASE),
    ],
    "syntax": [
        re.compile(r"syntax error", re.IGNORECASE),
    ],
    "command": [
        re.compile(r"invalid command", re.IGNORECASE),
        re.compile(r"unknown command", re.IGNORECASE),
    ],
    "argument": [
        re.compile(r"missing argument", re.IGNORECASE),
    ],
}


def detect_junos_error(output: str | None) -> str | None:
    """Return the category of the first JunOS error signature found, or None."""
    if not output:
        return None
    for category, patterns in JUNOS_ERRORS.items():
        for pat in patterns:
            if pat.search(output):
                return category
    return None


def is_junos_error(output: str | None) -> bool:
    return detect_junos_error(output) is not None


# ---------------------------------------------------------------------------
# Connection failure messages
# ---------------------------------------------------------------------------

_BASTION_FAILURE_RE = re.compile(
    r"permission denied|authentication failed|command failed"
    r"|returned nonzero exit status",
    re.IGNORECASE,
)


def is_bastion_auth_error(cause: str, options: ConnectionOptions) -> bool:
    if not (options.bastion_host or options.proxy_command):
        return False
    return bool(_BASTION_FAILURE_RE.search(cause))


def connection_error_message(cause: str, options: ConnectionOptions) -> str:
    """Build the message raised for a failed connect."""
    if not is_bastion_auth_error(cause, options):
        return f"Failed to connect to Juniper device {options.host}: {cause}"

    via = options.bastion_host or "proxy command"
    return (
        f"Failed to connect to Juniper device {options.host} via bastion {via}: {cause}\n"
        "\n"
        "Possible causes:\n"
        f"1. Incorrect bastion credentials (user: {options.effective_bastion_user})\n"
        "2. Network connectivity issues to bastion host\n"
        f"3. Bastion host SSH service not available on port {options.bastion_port}\n"
        "4. Target device not reachable from bastion\n"
        "\n"
        "Authentication options:\n"
        "- Password: set the bastion_password option (or JUNIPER_BASTION_PASSWORD)\n"
        "- SSH Key: set the key_files option to your private key file(s)\n"
        "- SSH Agent: ensure your SSH agent has the required keys loaded\n"
        "\n"
        f"For more details, see: {BASTION_DOCS_POINTER}\n"
    )


# ---------------------------------------------------------------------------
# show version parsing
# ---------------------------------------------------------------------------

# Most specific first; the bare dotted number is the last resort.
VERSION_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"<junos-version>\s*([\w.-]+)\s*</junos-version>"),
    re.compile(r"Junos:\s+([\w.-]+)"),
    re.compile(r"JUNOS Software Release \[([\w.-]+)\]"),
    re.compile(r"junos version ([\w.-]+)", re.IGNORECASE),
    re.compile(r"Model: \S+, JUNOS Base OS boot \[([\w.-]+)\]"),
    re.compile(r"(\d+\.\d+[\w.-]*)"),
]

ARCHITECTURE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"<product-model>\s*([\w.-]+)\s*</product-model>"),
    re.compile(r"Model:\s+(\S+)"),
    re.compile(
        r"Junos:\s+[\w.-]+\s+built\s+[\d-]+\s+[\d:]+\s+by\s+builder\s+on\s+(\S+)",
    ),
    re.compile(r"JUNOS.*\[([\w-]+)\]"),
    re.compile(r"Architecture:\s+(\S+)", re.IGNORECASE),
    re.compile(r"Platform:\s+(\S+)", re.IGNORECASE),
    re.compile(r"Processor.*:\s*(\S+)", re.IGNORECASE),
]

# Model families mapped to the CPU architecture they ship with
MODEL_ARCHITECTURES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"SRX\d+", re.IGNORECASE), "x86_64"),
    (re.compile(r"MX\d+", re.IGNORECASE), "x86_64"),
    (re.compile(r"EX\d+", re.IGNORECASE), "arm64"),
    (re.compile(r"QFX\d+", re.IGNORECASE), "x86_64"),
]

_CPU_TOKEN_RE = re.compile(
    r"^(x86_64|amd64|i386|arm64|aarch64|sparc|mips)$", re.IGNORECASE,
)


def extract_version(output: str | None) -> str | None:
    """Extract the JunOS release string from ``show version`` output."""
    if not output:
        return None
    for pat in VERSION_PATTERNS:
        m = pat.search(output)
        if m:
            return m.group(1)
    return None


def architecture_for(token: str) -> str:
    """Map a model name or CPU token to an architecture token."""
    for pat, arch in MODEL_ARCHITECTURES:
        if pat.search(token):
            return arch
    if _CPU_TOKEN_RE.match(token):
        return token.lower()
    return token


def extract_architecture(output: str | None) -> str | None:
    """Extract an architecture indicator from ``show version`` output."""
    if not output:
        return None
    for pat in ARCHITECTURE_PATTERNS:
        m = pat.search(output)
        if m:
            return architecture_for(m.group(1))
    return None


# ---------------------------------------------------------------------------
# Chassis inventory parsing
# ---------------------------------------------------------------------------

_SERIAL_XML_RE = re.compile(r"<serial-number>\s*([^<\s]+)\s*</serial-number>")
_SERIAL_TEXT_RE = re.compile(r"^Chassis\s+(\S+)", re.MULTILINE)


def extract_chassis_serial(output: str | None) -> str | None:
    """Return the chassis serial from ``show chassis hardware`` (XML or text)."""
    if not output:
        return None
    m = _SERIAL_XML_RE.search(output) or _SERIAL_TEXT_RE.search(output)
    return m.group(1) if m else None
