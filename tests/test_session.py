"""Tests for the SSH session manager against a fake paramiko client."""

from __future__ import annotations

import sys
from pathlib import Path

import paramiko
import pytest

from junos_connector.errors import TransportError
from junos_connector.models.options import validate_options
from junos_connector.services import proxy
from junos_connector.services.session import SessionManager, SessionState
from tests.mock_ssh import FakeProxy, FakeSSHClient, client_factory


def _session(client: FakeSSHClient, **extra) -> SessionManager:
    opts = validate_options({"host": "mx1", "user": "admin", **extra})
    return SessionManager(opts, client_factory=client_factory(client))


class TestConnectKwargs:
    def test_password_and_timeouts(self):
        session = _session(FakeSSHClient(), password="pw", timeout=12, port=830)
        kwargs = session.build_connect_kwargs()
        assert kwargs["hostname"] == "mx1"
        assert kwargs["port"] == 830
        assert kwargs["username"] == "admin"
        assert kwargs["password"] == "pw"
        assert kwargs["timeout"] == kwargs["banner_timeout"] == kwargs["auth_timeout"] == 12

    def test_keys_only(self):
        session = _session(FakeSSHClient(), key_files=["/k/id"], keys_only=True)
        kwargs = session.build_connect_kwargs()
        assert kwargs["key_filename"] == ["/k/id"]
        assert kwargs["look_for_keys"] is False
        assert kwargs["allow_agent"] is False

    def test_no_password_key(self):
        kwargs = _session(FakeSSHClient()).build_connect_kwargs()
        assert "password" not in kwargs
        assert "key_filename" not in kwargs


class TestConnect:
    def test_connect_configures_cli(self):
        client = FakeSSHClient()
        session = _session(client)
        session.connect()
        assert session.connected
        assert session.state is SessionState.connected
        assert client.sent_commands == [
            "show system uptime",
            "set cli screen-length 0",
            "set cli screen-width 0",
        ]
        assert isinstance(client.policy, paramiko.AutoAddPolicy)
        assert "sock" not in client.connect_kwargs

    def test_complete_on_space_disabled_on_request(self):
        client = FakeSSHClient()
        _session(client, disable_complete_on_space=True).connect()
        assert client.sent_commands[-1] == "set cli complete-on-space off"

    def test_keepalive_applied(self):
        client = FakeSSHClient()
        _session(client, keepalive_interval=15).connect()
        assert client.transport.keepalive == 15

    def test_keepalive_disabled(self):
        client = FakeSSHClient()
        _session(client, keepalive=False).connect()
        assert client.transport.keepalive is None

    def test_connect_twice_is_noop(self):
        client = FakeSSHClient()
        session = _session(client)
        session.connect()
        session.connect()
        assert client.sent_commands.count("show system uptime") == 1

    def test_tuning_failure_does_not_fail_connect(self):
        client = FakeSSHClient(fail_on="set cli screen-length 0")
        session = _session(client)
        session.connect()
        assert session.connected

    def test_connect_failure(self):
        client = FakeSSHClient(connect_error=OSError("Connection refused"))
        session = _session(client)
        with pytest.raises(TransportError) as exc_info:
            session.connect()
        assert str(exc_info.value) == (
            "Failed to connect to Juniper device mx1: Connection refused"
        )
        assert not session.connected
        assert session.state is SessionState.disconnected
        assert client.closed

    def test_simulated_always_connected(self):
        session = _session(FakeSSHClient(), simulated=True)
        assert session.connected


class TestRunAndClose:
    def test_run_requires_connection(self):
        session = _session(FakeSSHClient())
        with pytest.raises(TransportError):
            session.run("show version")

    def test_run_returns_output(self):
        client = FakeSSHClient()
        client.add_response("show route", "inet.0: 1 destinations\n")
        session = _session(client)
        session.connect()
        assert session.run("show route") == "inet.0: 1 destinations\n"

    def test_close(self):
        client = FakeSSHClient()
        session = _session(client)
        session.connect()
        assert session.is_alive()
        session.close()
        assert client.closed
        assert not session.connected
        assert not session.is_alive()

    def test_close_when_never_connected(self):
        session = _session(FakeSSHClient())
        session.close()
        assert session.state is SessionState.disconnected


@pytest.fixture
def spawned(monkeypatch):
    """Replace the proxy child with a FakeProxy; collect what was spawned."""
    procs: list[FakeProxy] = []

    def fake_spawn(command, env):
        proc = FakeProxy(command, env)
        procs.append(proc)
        return proc

    monkeypatch.setattr(proxy, "_spawn", fake_spawn)
    return procs


@pytest.mark.skipif(sys.platform == "win32", reason="plink relay is chosen on Windows")
class TestConnectViaBastion:
    def test_askpass_exists_only_during_connect(self, spawned):
        seen = {}

        def on_connect(kwargs):
            seen["sock"] = kwargs.get("sock")
            askpass = Path(spawned[0].env["SSH_ASKPASS"])
            seen["askpass"] = askpass
            seen["existed"] = askpass.exists()

        client = FakeSSHClient(on_connect=on_connect)
        session = _session(client, bastion_host="jump1", bastion_password="bpw")
        session.connect()

        assert session.connected
        assert len(spawned) == 1
        assert seen["sock"] is spawned[0]
        assert seen["existed"]
        assert not seen["askpass"].exists()
        assert spawned[0].env["SSH_ASKPASS_REQUIRE"] == "force"
        assert "-W mx1:22" in spawned[0].command
        assert spawned[0].command.endswith("admin@jump1")
        assert "bpw" not in spawned[0].command
        assert not spawned[0].closed

    def test_key_only_bastion_has_no_askpass(self, spawned):
        client = FakeSSHClient()
        session = _session(client, bastion_host="jump1", key_files=["/k/id"])
        session.connect()
        assert client.connect_kwargs["sock"] is spawned[0]
        assert spawned[0].env is None
        assert "-i /k/id" in spawned[0].command

    def test_bastion_auth_failure(self, spawned):
        seen = {}

        def on_connect(kwargs):
            seen["askpass"] = Path(spawned[0].env["SSH_ASKPASS"])

        client = FakeSSHClient(
            connect_error=paramiko.AuthenticationException(
                "Permission denied (publickey,password).",
            ),
            on_connect=on_connect,
        )
        session = _session(
            client, bastion_host="jump1", bastion_user="netops", bastion_password="bpw",
        )
        with pytest.raises(TransportError) as exc_info:
            session.connect()

        message = str(exc_info.value)
        assert message.startswith(
            "Failed to connect to Juniper device mx1 via bastion jump1: "
            "Permission denied (publickey,password).\n"
        )
        assert "Possible causes:" in message
        assert "Incorrect bastion credentials (user: netops)" in message
        assert "Authentication options:" in message
        assert "bpw" not in message
        assert not seen["askpass"].exists()
        assert spawned[0].closed
        assert client.closed
        assert session.state is SessionState.disconnected

    def test_unrelated_failure_via_bastion_is_one_line(self, spawned):
        client = FakeSSHClient(connect_error=OSError("Connection reset by peer"))
        session = _session(client, bastion_host="jump1")
        with pytest.raises(TransportError) as exc_info:
            session.connect()
        assert str(exc_info.value) == (
            "Failed to connect to Juniper device mx1: Connection reset by peer"
        )
        assert spawned[0].closed
