"""Bastion / jump host proxy selection.

A proxy plan is chosen by a pure function from the connection options and
the running platform, then turned into a live socket-like object by
``open_proxy`` at connect time:

* ``NoProxy`` – direct TCP connection.
* ``NativeJump`` – OpenSSH ``ssh -W`` through the bastion.  When a bastion
  password is known, OpenSSH is pointed at a throw-away askpass helper via
  the *child's* environment only; the helper is deleted once the block
  around the connect returns.
* ``PasswordRelay`` – Windows only: OpenSSH for Windows cannot take the
  password through askpass for a jump, so PuTTY's ``plink`` carries it.
* ``RawProxyCommand`` – a user supplied ProxyCommand.
"""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import sys
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, Literal, Optional, Union

import paramiko
from pydantic import BaseModel, ConfigDict, SecretStr

from junos_connector.constants import DEFAULT_SSH_PORT, STANDARD_SSH_OPTIONS
from junos_connector.errors import TransportError
from junos_connector.models.options import ConnectionOptions
from junos_connector.utils.logging import get_logger

log = get_logger(__name__)

RELAY_EXECUTABLE = "plink"
ASKPASS_ENV = "SSH_ASKPASS"
ASKPASS_REQUIRE_ENV = "SSH_ASKPASS_REQUIRE"
PASSWORD_PLACEHOLDER = "%w"


# ── plans ─────────────────────────────────────────────────────────────────


class _Plan(BaseModel):
    model_config = ConfigDict(frozen=True)


class NoProxy(_Plan):
    kind: Literal["none"] = "none"


class NativeJump(_Plan):
    kind: Literal["native-jump"] = "native-jump"
    jump_host: str
    command: str
    password: Optional[SecretStr] = None

    @property
    def needs_askpass(self) -> bool:
        return self.password is not None


class PasswordRelay(_Plan):
    """plink relay; ``command`` holds a ``%w`` placeholder for the password."""

    kind: Literal["password-relay"] = "password-relay"
    jump_host: str
    command: str
    password: SecretStr


class RawProxyCommand(_Plan):
    kind: Literal["proxy-command"] = "proxy-command"
    command: str


ProxyPlan = Union[NoProxy, NativeJump, PasswordRelay, RawProxyCommand]


def jump_host_string(user: str, host: str, port: int) -> str:
    """``user@host`` or ``user@host:port`` for a non-default port."""
    if port == DEFAULT_SSH_PORT:
        return f"{user}@{host}"
    return f"{user}@{host}:{port}"


def build_jump_command(options: ConnectionOptions) -> str:
    """OpenSSH command that tunnels stdin/stdout to ``%h:%p`` via the bastion."""
    args = ["ssh"]
    for key, value in STANDARD_SSH_OPTIONS.items():
        args += ["-o", f"{key}={value}"]
    for key_file in options.key_files or []:
        args += ["-i", shlex.quote(key_file)]
    if options.bastion_port != DEFAULT_SSH_PORT:
        args += ["-p", str(options.bastion_port)]
    args += ["-W", "%h:%p"]
    args.append(f"{options.effective_bastion_user}@{options.bastion_host}")
    return " ".join(args)


def build_relay_command(bastion_host: str, user: str, port: int) -> str:
    """plink invocation: batch mode, SSH only, inline password, netcat mode.

    The password is left as ``%w`` and only filled in by ``command_line``.
    """
    parts = [f"{RELAY_EXECUTABLE}.exe", "-batch", "-ssh", "-pw", PASSWORD_PLACEHOLDER]
    if port and port != DEFAULT_SSH_PORT:
        parts += ["-P", str(port)]
    parts += [f"{user}@{bastion_host}", "-nc", "%h:%p"]
    return " ".join(parts)


def select_proxy_plan(
    options: ConnectionOptions,
    *,
    platform: str = sys.platform,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> ProxyPlan:
    """Pick how traffic reaches the device. Pure: no files, no processes."""
    if options.proxy_command:
        return RawProxyCommand(command=options.proxy_command)
    if not options.bastion_host:
        return NoProxy()

    user = options.effective_bastion_user
    jump = jump_host_string(user, options.bastion_host, options.bastion_port)
    password = options.effective_bastion_password

    if password is not None and platform == "win32" and which(RELAY_EXECUTABLE):
        return PasswordRelay(
            jump_host=jump,
            command=build_relay_command(
                options.bastion_host, user, options.bastion_port,
            ),
            password=password,
        )
    return NativeJump(
        jump_host=jump,
        command=build_jump_command(options),
        password=password,
    )


# ── askpass helper ────────────────────────────────────────────────────────


def write_askpass_script(
    directory: Path, password: str, *, platform: str = sys.platform,
) -> Path:
    """Write an executable that prints *password* and exits; return its path."""
    if platform == "win32":
        script = directory / "ssh_askpass.ps1"
        escaped = password.replace("'", "''")
        script.write_text(f"Write-Output '{escaped}'\r\n", encoding="utf-8")
        # OpenSSH runs SSH_ASKPASS directly, so wrap the PowerShell script
        wrapper = directory / "ssh_askpass.bat"
        wrapper.write_text(
            "@echo off\r\n"
            f'powershell.exe -ExecutionPolicy Bypass -File "{script}"\r\n',
            encoding="utf-8",
        )
        return wrapper

    script = directory / "ssh_askpass.sh"
    script.write_text(
        f"#!/bin/sh\nprintf '%s\\n' {shlex.quote(password)}\n", encoding="utf-8",
    )
    script.chmod(0o700)
    return script


@contextmanager
def askpass_environment(
    password: str, *, platform: str = sys.platform,
) -> Iterator[dict[str, str]]:
    """Environment for a child ssh process that answers prompts with *password*.

    The helper lives in a private temporary directory removed on exit.
    ``os.environ`` is copied, never modified.
    """
    with tempfile.TemporaryDirectory(prefix="junos-askpass-") as tmp:
        script = write_askpass_script(Path(tmp), password, platform=platform)
        log.debug("proxy.askpass_created", path=str(script))
        env = dict(os.environ)
        env[ASKPASS_ENV] = str(script)
        env[ASKPASS_REQUIRE_ENV] = "force"
        try:
            yield env
        finally:
            log.debug("proxy.askpass_removed", path=str(script))


# ── proxy process ─────────────────────────────────────────────────────────


class ProxyProcess(paramiko.ProxyCommand):
    """``paramiko.ProxyCommand`` that can hand the child its own environment."""

    def __init__(self, command_line: str, env: Optional[dict[str, str]] = None):
        # Same setup as ProxyCommand.__init__, plus ``env``
        self.cmd = shlex.split(command_line)
        self.process = subprocess.Popen(
            self.cmd,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            bufsize=0,
            env=env,
        )
        self.timeout = None


def render_command(command: str, host: str, port: int) -> str:
    """Substitute the ``%h`` / ``%p`` placeholders with the target."""
    return command.replace("%h", host).replace("%p", str(port))


def command_line(plan: ProxyPlan, host: str, port: int) -> str:
    """The command to spawn for *plan*, secrets included. Never log it."""
    command = render_command(plan.command, host, port)
    if isinstance(plan, PasswordRelay):
        # Last, so a password containing %h or %p is left alone
        password = shlex.quote(plan.password.get_secret_value())
        command = command.replace(PASSWORD_PLACEHOLDER, password)
    return command


@contextmanager
def open_proxy(
    plan: ProxyPlan, host: str, port: int,
) -> Iterator[Optional[ProxyProcess]]:
    """Start the proxy child for *plan*; yields ``None`` for a direct connect.

    Keep the connect (and so authentication) inside the block: any askpass
    helper is deleted when it exits.  The proxy process itself lives on as
    the transport's socket.
    """
    if isinstance(plan, NoProxy):
        yield None
        return

    command = command_line(plan, host, port)
    if isinstance(plan, NativeJump) and plan.needs_askpass:
        with askpass_environment(plan.password.get_secret_value()) as env:
            yield _spawn(command, env)
    else:
        yield _spawn(command, None)


def _spawn(command: str, env: Optional[dict[str, str]]) -> ProxyProcess:
    try:
        return ProxyProcess(command, env=env)
    except OSError as exc:
        executable = shlex.split(command)[0] if command.strip() else command
        raise TransportError(
            f"proxy command failed: cannot start {executable!r}: {exc}",
        ) from exc
