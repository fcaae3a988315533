"""Shared pytest fixtures for ssh-tunnels tests."""

import subprocess
from unittest.mock import Mock

import pytest


class FakeSSHClient:
    """Stand-in for subprocess.run that behaves like a multiplexing ssh client.

    Masters are tracked per control socket name: "-M" starts one, "-O check"
    succeeds only while one is alive, "-O exit" stops it.
    """

    def __init__(self):
        self.masters: dict[str, list[str]] = {}
        self.calls: list[list[str]] = []
        self.call_kwargs: list[dict] = []
        self.fail_run = False

    def __call__(self, args, **kwargs):
        self.calls.append(list(args))
        self.call_kwargs.append(kwargs)
        socket_name = args[args.index("-S") + 1]

        if "-M" in args:
            if self.fail_run:
                return subprocess.CompletedProcess(args, 255, stdout=None, stderr=None)
            self.masters[socket_name] = list(args)
            return subprocess.CompletedProcess(args, 0, stdout=None, stderr=None)

        action = args[args.index("-O") + 1]
        if action == "check":
            returncode = 0 if socket_name in self.masters else 255
            stderr = "" if returncode == 0 else f"Control socket connect({socket_name}): No such file or directory"
            return subprocess.CompletedProcess(args, returncode, stdout="", stderr=stderr)

        if action == "exit":
            returncode = 0 if self.masters.pop(socket_name, None) is not None else 255
            return subprocess.CompletedProcess(args, returncode, stdout="", stderr="")

        return subprocess.CompletedProcess(args, 255, stdout="", stderr="unknown action")

    def run_calls(self) -> list[list[str]]:
        return [call for call in self.calls if "-M" in call]


@pytest.fixture
def fake_ssh(monkeypatch):
    """Replace subprocess.run with a fake multiplexing ssh client.

    Returns:
        FakeSSHClient: The installed fake
    """
    client = FakeSSHClient()
    monkeypatch.setattr("subprocess.run", client)
    return client


@pytest.fixture
def ssh_binary(tmp_path):
    """Create an executable placeholder for the ssh client.

    Returns:
        Path: Path to the placeholder binary
    """
    binary_path = tmp_path / "bin" / "ssh"
    binary_path.parent.mkdir()
    binary_path.write_text("#!/bin/sh\nexit 0\n")
    binary_path.chmod(0o755)
    return binary_path


@pytest.fixture
def socket_dir(tmp_path):
    return tmp_path / "sockets"


@pytest.fixture
def sample_tunnels():
    """A small configuration store covering every tunnel type."""
    from ssh_tunnels.tunnels.models import TunnelDefinition  # noqa: PLC0415

    return [
        TunnelDefinition(
            name="db",
            login="me@bastion",
            host="db.internal",
            local_port=1234,
            remote_port=3306,
        ),
        TunnelDefinition(name="web", login="me@bastion", local_port=8080),
        TunnelDefinition(name="socks", type="dynamic", login="me@bastion", local_port=1080),
        TunnelDefinition(
            name="docker",
            type="local",
            login="me@buildhost",
            local_socket="/tmp/docker.sock",
            remote_socket="/var/run/docker.sock",
        ),
        TunnelDefinition(name="alias", type="shell", login="work-vpn", local_port=2222),
    ]


@pytest.fixture
def config(ssh_binary, socket_dir, sample_tunnels):
    """Configuration pointing at the placeholder binary."""
    from ssh_tunnels.config import SSHTunnelsConfig  # noqa: PLC0415

    return SSHTunnelsConfig(
        ssh_program=str(ssh_binary),
        temp_directory=str(socket_dir),
        tunnels=sample_tunnels,
    )


@pytest.fixture
def overrides():
    from ssh_tunnels.tunnels.state import OverrideStateStore  # noqa: PLC0415

    return OverrideStateStore()


@pytest.fixture
def executor(config, overrides):
    from ssh_tunnels.tunnels.process import ControlSocketExecutor  # noqa: PLC0415

    return ControlSocketExecutor(config, overrides)


@pytest.fixture
def manager(config, overrides, executor):
    from ssh_tunnels.tunnels.manager import TunnelManager  # noqa: PLC0415

    return TunnelManager(config, overrides=overrides, executor=executor)


@pytest.fixture
def mock_logger(monkeypatch):
    """Mock the executor's logger to capture log calls.

    Returns:
        Mock: Mocked logger
    """
    mock_log = Mock()
    monkeypatch.setattr("ssh_tunnels.tunnels.process.logger", mock_log)
    return mock_log
