"""Tests for tunnel models."""

import pytest
from pydantic import ValidationError

from ssh_tunnels.tunnels import (
    ControlCommand,
    ResolvedTunnel,
    TunnelDefinition,
    TunnelState,
    TunnelType,
)


class TestTunnelEnums:
    def test_tunnel_type_enum(self):
        """Test TunnelType enum values"""
        assert TunnelType.LOCAL == "local"
        assert TunnelType.REMOTE == "remote"
        assert TunnelType.DYNAMIC == "dynamic"
        assert TunnelType.SHELL == "shell"

    def test_tunnel_type_flags(self):
        """Each forwarding type maps to its ssh flag, shell to none"""
        assert TunnelType.LOCAL.flag == "-L"
        assert TunnelType.REMOTE.flag == "-R"
        assert TunnelType.DYNAMIC.flag == "-D"
        assert TunnelType.SHELL.flag is None

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("-L", TunnelType.LOCAL),
            ("-R", TunnelType.REMOTE),
            ("-D", TunnelType.DYNAMIC),
            ("Remote", TunnelType.REMOTE),
            ("shell-managed", TunnelType.SHELL),
            (TunnelType.DYNAMIC, TunnelType.DYNAMIC),
        ],
    )
    def test_tunnel_type_parse(self, value, expected):
        assert TunnelType.parse(value) == expected

    def test_tunnel_type_parse_rejects_unknown(self):
        with pytest.raises(ValueError):
            TunnelType.parse("-X")

    def test_command_and_state_enums(self):
        assert [c.value for c in ControlCommand] == ["run", "check", "kill"]
        assert TunnelState.RUNNING == "running"
        assert TunnelState.STOPPED == "stopped"


class TestTunnelDefinition:
    def test_minimal_definition(self):
        """Only name and login are required"""
        tunnel = TunnelDefinition(name="db", login="me@bastion")

        assert tunnel.type == TunnelType.LOCAL
        assert tunnel.host is None
        assert tunnel.local_port is None
        assert tunnel.remote_port is None
        assert tunnel.local_socket is None
        assert tunnel.remote_socket is None

    def test_type_accepts_flag_spelling(self):
        tunnel = TunnelDefinition(name="r", type="-R", login="me@host")
        assert tunnel.type == TunnelType.REMOTE

    def test_invalid_type_rejected(self):
        with pytest.raises(ValidationError):
            TunnelDefinition(name="x", type="udp", login="me@host")

    def test_login_required(self):
        with pytest.raises(ValidationError):
            TunnelDefinition(name="db")

        with pytest.raises(ValidationError):
            TunnelDefinition(name="db", login="")

    @pytest.mark.parametrize("name", ["", "a/b", "with space", "..", "tab\tname", "db%h", "~db"])
    def test_name_must_be_safe_socket_name(self, name):
        """Tunnel names become control socket file names"""
        with pytest.raises(ValidationError):
            TunnelDefinition(name=name, login="me@host")

    def test_port_range_validation(self):
        TunnelDefinition(name="ok", login="me@host", local_port=1, remote_port=65535)

        with pytest.raises(ValidationError):
            TunnelDefinition(name="low", login="me@host", local_port=0)

        with pytest.raises(ValidationError):
            TunnelDefinition(name="high", login="me@host", remote_port=65536)

    def test_conflicting_endpoints_accepted_by_model(self):
        """Mutual exclusion is left to the validator"""
        tunnel = TunnelDefinition(
            name="both", login="me@host", local_port=1234, local_socket="/tmp/a"
        )
        assert tunnel.local_port == 1234
        assert tunnel.local_socket == "/tmp/a"

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            TunnelDefinition(name="db", login="me@host", localport=1234)

    def test_definition_is_immutable(self):
        tunnel = TunnelDefinition(name="db", login="me@host", local_port=1234)

        with pytest.raises(ValidationError):
            tunnel.local_port = 4321

    def test_with_local_port_replaces_local_endpoint(self):
        """Ad-hoc copies drop the socket and keep the original untouched"""
        tunnel = TunnelDefinition(
            name="sock", login="me@host", local_socket="/tmp/a", remote_port=80
        )

        adhoc = tunnel.with_local_port(1235)

        assert adhoc.local_port == 1235
        assert adhoc.local_socket is None
        assert adhoc.remote_port == 80
        assert adhoc.name == "sock"
        assert tunnel.local_port is None
        assert tunnel.local_socket == "/tmp/a"

    def test_with_local_port_validates_port(self):
        tunnel = TunnelDefinition(name="db", login="me@host")

        with pytest.raises(ValidationError):
            tunnel.with_local_port(70000)


class TestResolvedTunnel:
    def test_endpoints_prefer_ports(self):
        resolved = ResolvedTunnel(
            name="db",
            type=TunnelType.LOCAL,
            login="me@host",
            host="localhost",
            local_port=1234,
            remote_socket="/tmp/r",
        )

        assert resolved.local_endpoint == 1234
        assert resolved.remote_endpoint == "/tmp/r"

    def test_missing_endpoints_are_none(self):
        resolved = ResolvedTunnel(
            name="alias", type=TunnelType.SHELL, login="work", host="localhost"
        )

        assert resolved.local_endpoint is None
        assert resolved.remote_endpoint is None
