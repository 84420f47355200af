"""Canned JunOS responses served in simulated mode."""

from __future__ import annotations

from junos_connector.models.commands import CommandResult

# ── Canned JunOS outputs ──────────────────────────────────────────────────

SHOW_VERSION = """\
Hostname: lab-srx
Model: SRX240H2
Junos: 12.1X47-D15.4
JUNOS Software Release [12.1X47-D15.4]
"""

SHOW_CHASSIS_HARDWARE = """\
Hardware inventory:
Item             Version  Part number  Serial number     Description
Chassis                                JN123456          SRX240H2
"""

SHOW_VERSION_XML = """\
<rpc-reply xmlns:junos="http://xml.juniper.net/junos/12.1X47/junos">
  <software-information>
    <host-name>lab-srx</host-name>
    <product-model>SRX240H2</product-model>
    <product-name>srx240h2</product-name>
    <junos-version>12.1X47-D15.4</junos-version>
  </software-information>
</rpc-reply>
"""

SHOW_CHASSIS_HARDWARE_XML = """\
<rpc-reply xmlns:junos="http://xml.juniper.net/junos/12.1X47/junos">
  <chassis-inventory xmlns="http://xml.juniper.net/junos/12.1X47/junos-chassis">
    <chassis junos:style="inventory">
      <name>Chassis</name>
      <serial-number>JN123456</serial-number>
      <description>SRX240H2</description>
    </chassis>
  </chassis-inventory>
</rpc-reply>
"""

SHOW_CONFIGURATION = """\
interfaces {
    ge-0/0/0 {
        unit 0;
    }
}"""

SHOW_ROUTE = """\
inet.0: 5 destinations, 5 routes
0.0.0.0/0       *[Static/5] 00:00:01
"""

SHOW_SYSTEM_INFORMATION = "Hardware: SRX240H2\nOS: JUNOS 12.1X47-D15.4\n"

SHOW_INTERFACES = "Physical interface: ge-0/0/0, Enabled, Physical link is Up\n"

SHOW_SYSTEM_UPTIME = "Current time: 2024-01-01 00:00:00 UTC\nSystem booted: 2023-12-01\n"


# ── Canned response map ──────────────────────────────────────────────────

# Matched by substring, first hit wins
_CANNED: dict[str, str] = {
    "show version": SHOW_VERSION,
    "show chassis hardware": SHOW_CHASSIS_HARDWARE,
    "show configuration": SHOW_CONFIGURATION,
    "show route": SHOW_ROUTE,
    "show system information": SHOW_SYSTEM_INFORMATION,
    "show system uptime": SHOW_SYSTEM_UPTIME,
    "show interfaces": SHOW_INTERFACES,
}

_CANNED_XML: dict[str, str] = {
    "show version": SHOW_VERSION_XML,
    "show chassis hardware": SHOW_CHASSIS_HARDWARE_XML,
}


def lookup(command: str) -> tuple[str, int]:
    """Return ``(output, exit_code)`` for *command*."""
    if "| display xml" in command:
        base = command.split("|", 1)[0].strip()
        if base in _CANNED_XML:
            return _CANNED_XML[base], 0

    for key, output in _CANNED.items():
        if key in command:
            return output, 0
    return f"% Unknown command: {command}", 1


def response_for(command: str) -> CommandResult:
    output, exit_code = lookup(command)
    return CommandResult(stdout=output, exit_code=exit_code)
