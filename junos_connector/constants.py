"""Shared constants for JunOS connections."""

from __future__ import annotations

import re

PLATFORM_NAME = "juniper"
PLATFORM_TITLE = "Juniper JunOS"
PLATFORM_FAMILY = "bsd"

DEFAULT_SSH_PORT = 22
MIN_PORT = 1
MAX_PORT = 65535

# OpenSSH options for hops to network gear (keys rotate on firmware upgrade)
STANDARD_SSH_OPTIONS: dict[str, str] = {
    "UserKnownHostsFile": "/dev/null",
    "StrictHostKeyChecking": "no",
    "LogLevel": "ERROR",
    "ForwardAgent": "no",
}

# ── Session ───────────────────────────────────────────────────────────────
PROBE_COMMAND = "show system uptime"
CLI_TUNING_COMMANDS: list[str] = [
    "set cli screen-length 0",
    "set cli screen-width 0",
]
COMPLETE_ON_SPACE_OFF = "set cli complete-on-space off"

IDENTIFY_COMMAND = "show version"
INVENTORY_XML_COMMAND = "show chassis hardware | display xml"

# ── Prompts ───────────────────────────────────────────────────────────────
PROMPT_ONLY_LINE = re.compile(r"^[%>$#]+\s*$")

# ── Virtual file paths ────────────────────────────────────────────────────
CONFIG_PATH_PATTERN = re.compile(r"/config/(.*)")
OPERATIONAL_PATH_PATTERN = re.compile(r"/operational/(.*)")

UPLOAD_NOT_SUPPORTED = (
    "File upload is not supported for Juniper devices - "
    "use command execution to change configuration"
)
DOWNLOAD_NOT_SUPPORTED = (
    "File download is not supported for Juniper devices - "
    "use command execution to retrieve data"
)

BASTION_DOCS_POINTER = "README.md#bastion-authentication"
