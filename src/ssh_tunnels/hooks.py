"""Auto-start integration for outbound connections.

The hosting environment owns connection interception. It registers hooks on
a ConnectionHooks instance and notifies them right before opening a
connection; AutoStartHook then makes sure a matching tunnel is up.
"""

import socket
from typing import Protocol

from .common.exceptions import SSHTunnelsError
from .common.logging import get_logger
from .tunnels.manager import TunnelManager
from .tunnels.models import TunnelDefinition

logger = get_logger(__name__)


class ConnectionHook(Protocol):
    """Callable notified before a connection to host:service is opened."""

    def __call__(self, host: str, service: int | str) -> object: ...


class AutoStartHook:
    """Starts the tunnel serving host:service if it is not running."""

    def __init__(self, manager: TunnelManager, enabled: bool = True):
        self.manager = manager
        self.enabled = enabled

    def __call__(self, host: str, service: int | str) -> TunnelDefinition | None:
        """Ensure the tunnel for host:service is running.

        Failures to start are logged, not raised, so the connection attempt
        goes ahead either way.

        Returns:
            Matching tunnel definition, or None if no tunnel serves the pair
        """
        if not self.enabled:
            return None

        tunnel = self.manager.find_tunnel_for(host, service)
        if tunnel is None:
            return None

        try:
            if self.manager.executor.check(tunnel):
                return tunnel
            logger.info("Auto-starting tunnel", tunnel=tunnel.name, host=host, service=service)
            if not self.manager.executor.run(tunnel):
                logger.error("Auto-start failed", tunnel=tunnel.name)
        except SSHTunnelsError as e:
            logger.error("Auto-start failed", tunnel=tunnel.name, error=str(e))
        return tunnel


class ConnectionHooks:
    """Registry of hooks notified before outbound connections."""

    def __init__(self) -> None:
        self._hooks: list[ConnectionHook] = []

    def register(self, hook: ConnectionHook) -> None:
        if hook not in self._hooks:
            self._hooks.append(hook)

    def unregister(self, hook: ConnectionHook) -> None:
        """Remove a hook. Unknown hooks are ignored."""
        if hook in self._hooks:
            self._hooks.remove(hook)

    def notify(self, host: str, service: int | str) -> None:
        """Call every registered hook in registration order."""
        for hook in list(self._hooks):
            hook(host, service)

    def __len__(self) -> int:
        return len(self._hooks)


def open_connection(
    host: str,
    port: int,
    hooks: ConnectionHooks,
    timeout: float | None = None,
) -> socket.socket:
    """Notify hooks, then open a TCP connection to host:port.

    Args:
        host: Host to connect to
        port: Port to connect to
        hooks: Hooks to notify first
        timeout: Socket connect timeout

    Returns:
        Connected socket
    """
    hooks.notify(host, port)
    return socket.create_connection((host, port), timeout=timeout)
