"""Tunnel manager for lifecycle management."""

from typing import TYPE_CHECKING

from ..common.logging import get_logger
from .lookup import find_tunnel_for
from .models import ResolvedTunnel, TunnelDefinition, TunnelInfo, TunnelState
from .process import ControlSocketExecutor
from .resolver import resolve_tunnel
from .state import OverrideStateStore
from .validator import validate_tunnel

if TYPE_CHECKING:
    from ..config import SSHTunnelsConfig

logger = get_logger(__name__)


class TunnelManager:
    """Runs, stops and lists the configured tunnels.

    State is never cached: every status query goes through the control
    socket, since the ssh client owns the authoritative state.
    """

    def __init__(
        self,
        config: "SSHTunnelsConfig",
        overrides: OverrideStateStore | None = None,
        executor: ControlSocketExecutor | None = None,
    ):
        """Initialize tunnel manager.

        Args:
            config: Settings and tunnel definitions
            overrides: Override store (a fresh one if None)
            executor: Command executor (built from config if None)
        """
        self.config = config
        self.overrides = overrides if overrides is not None else OverrideStateStore()
        self.executor = executor or ControlSocketExecutor(config, self.overrides)
        logger.info("Initialized TunnelManager", tunnels=len(config.tunnels))

    @property
    def tunnels(self) -> list[TunnelDefinition]:
        return self.config.tunnels

    def get_tunnel(self, name: str) -> TunnelDefinition:
        """Get tunnel definition by name.

        Raises:
            TunnelNotFoundError: If no tunnel has this name
        """
        return self.config.get_tunnel(name)

    def resolve(self, name: str) -> ResolvedTunnel:
        """Resolve a tunnel against the current overrides."""
        return resolve_tunnel(self.get_tunnel(name), self.overrides)

    def status(self, name: str) -> TunnelState:
        """Query whether a tunnel is running."""
        if self.executor.check(self.get_tunnel(name)):
            return TunnelState.RUNNING
        return TunnelState.STOPPED

    def run_tunnel(self, name: str, local_port: int | None = None) -> bool:
        """Start a tunnel unless it is already running.

        Args:
            name: Tunnel name
            local_port: Ad-hoc local port for this run only

        Returns:
            True if the tunnel is running or was started successfully

        Raises:
            TunnelNotFoundError: If no tunnel has this name
            TunnelConfigError: If the definition is invalid
            ForwardSpecError: If no forward spec can be built
        """
        tunnel = self.get_tunnel(name)
        validate_tunnel(tunnel)

        if self.executor.check(tunnel):
            logger.warning("Tunnel is already running", tunnel=name)
            return True

        return self.executor.run(tunnel, local_port=local_port)

    def kill_tunnel(self, name: str) -> bool:
        """Stop a tunnel.

        Returns:
            True if the client confirmed the master exited
        """
        return self.executor.kill(self.get_tunnel(name))

    def rerun_tunnel(self, name: str, local_port: int | None = None) -> bool:
        """Stop a tunnel, then start it again."""
        tunnel = self.get_tunnel(name)
        validate_tunnel(tunnel)
        self.executor.kill(tunnel)
        return self.executor.run(tunnel, local_port=local_port)

    def toggle_tunnel(self, name: str) -> TunnelState:
        """Stop a running tunnel or start a stopped one.

        Returns:
            State the tunnel is in afterwards
        """
        tunnel = self.get_tunnel(name)
        if self.executor.check(tunnel):
            self.executor.kill(tunnel)
            return self.status(name)

        validate_tunnel(tunnel)
        self.executor.run(tunnel)
        return self.status(name)

    def list_tunnels(self) -> list[TunnelInfo]:
        """Refresh the tunnel listing.

        Every definition is validated and every state queried afresh.

        Returns:
            One entry per tunnel, in configuration order

        Raises:
            TunnelConfigError: For the first invalid definition found
        """
        infos = []
        for tunnel in self.tunnels:
            validate_tunnel(tunnel)
            resolved = resolve_tunnel(tunnel, self.overrides)
            state = TunnelState.RUNNING if self.executor.check(tunnel) else TunnelState.STOPPED
            infos.append(
                TunnelInfo(
                    name=resolved.name,
                    type=resolved.type,
                    state=state,
                    login=resolved.login,
                    host=resolved.host,
                    local_endpoint=resolved.local_endpoint,
                    remote_endpoint=resolved.remote_endpoint,
                )
            )
        return infos

    def find_tunnel_for(self, host: str, service: int | str) -> TunnelDefinition | None:
        """Find the configured tunnel whose local end is host:service."""
        return find_tunnel_for(self.tunnels, host, service, self.overrides)

    def shutdown_all(self) -> bool:
        """Stop every running tunnel.

        Returns:
            True if all running tunnels stopped successfully
        """
        success = True
        for tunnel in self.tunnels:
            if not self.executor.check(tunnel):
                continue
            if not self.executor.kill(tunnel):
                success = False

        logger.info("Shutdown all tunnels", success=success)
        return success
