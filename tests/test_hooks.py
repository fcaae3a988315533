"""Tests for the auto-start connection hook."""

from unittest.mock import Mock, patch

from ssh_tunnels.common.exceptions import ForwardSpecError, ForwardSpecErrorReason
from ssh_tunnels.hooks import AutoStartHook, ConnectionHooks, open_connection


class TestAutoStartHook:
    def test_starts_matching_tunnel(self, manager, fake_ssh):
        hook = AutoStartHook(manager)

        tunnel = hook("localhost", "8080")

        assert tunnel.name == "web"
        assert manager.executor.check(tunnel) is True

    def test_running_tunnel_not_restarted(self, manager, fake_ssh):
        manager.run_tunnel("web")
        hook = AutoStartHook(manager)

        hook("localhost", 8080)

        assert len(fake_ssh.run_calls()) == 1

    def test_no_match_does_nothing(self, manager, fake_ssh):
        hook = AutoStartHook(manager)

        assert hook("example.com", 443) is None
        assert fake_ssh.calls == []

    def test_shell_tunnel_never_auto_started(self, manager, fake_ssh):
        assert AutoStartHook(manager)("localhost", 2222) is None
        assert fake_ssh.calls == []

    def test_unicode_digit_service_does_nothing(self, manager, fake_ssh):
        assert AutoStartHook(manager)("localhost", "\u00b2") is None
        assert fake_ssh.calls == []

    def test_disabled_hook(self, manager, fake_ssh):
        hook = AutoStartHook(manager, enabled=False)

        assert hook("localhost", 8080) is None
        assert fake_ssh.calls == []

    def test_failed_start_does_not_raise(self, manager, fake_ssh):
        fake_ssh.fail_run = True

        assert AutoStartHook(manager)("localhost", 8080).name == "web"

    def test_tunnel_errors_are_logged_not_raised(self, manager):
        manager.executor = Mock()
        manager.executor.check.return_value = False
        manager.executor.run.side_effect = ForwardSpecError(
            "web", ForwardSpecErrorReason.MISSING_LOCAL_PORT
        )

        assert AutoStartHook(manager)("localhost", 8080).name == "web"


class TestConnectionHooks:
    def test_register_and_notify(self):
        hooks = ConnectionHooks()
        first, second = Mock(), Mock()
        hooks.register(first)
        hooks.register(second)

        hooks.notify("localhost", 8080)

        first.assert_called_once_with("localhost", 8080)
        second.assert_called_once_with("localhost", 8080)

    def test_register_is_idempotent(self):
        hooks = ConnectionHooks()
        hook = Mock()
        hooks.register(hook)
        hooks.register(hook)

        assert len(hooks) == 1

    def test_unregister(self):
        hooks = ConnectionHooks()
        hook = Mock()
        hooks.register(hook)
        hooks.unregister(hook)
        hooks.unregister(hook)

        hooks.notify("localhost", 8080)

        hook.assert_not_called()

    def test_open_connection_notifies_before_connecting(self):
        hooks = ConnectionHooks()
        order = []
        hooks.register(lambda host, service: order.append(("hook", host, service)))
        sock = Mock()

        def fake_connect(address, timeout=None):
            order.append(("connect", address, timeout))
            return sock

        with patch("socket.create_connection", side_effect=fake_connect):
            result = open_connection("localhost", 8080, hooks, timeout=3)

        assert result is sock
        assert order == [("hook", "localhost", 8080), ("connect", ("localhost", 8080), 3)]

    def test_open_connection_with_auto_start(self, manager, fake_ssh):
        hooks = ConnectionHooks()
        hooks.register(AutoStartHook(manager))

        with patch("socket.create_connection", return_value=Mock()):
            open_connection("db.internal", 1234, hooks)

        assert "db" in fake_ssh.masters
