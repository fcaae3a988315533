"""Custom exceptions for SSH tunnel management."""

from enum import Enum


class SSHTunnelsError(Exception):
    """Base exception for all ssh-tunnels errors."""

    pass


class ConfigurationError(SSHTunnelsError):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


class ConfigErrorReason(str, Enum):
    """Why a tunnel definition was rejected."""

    MUTUALLY_EXCLUSIVE_LOCAL = "mutually_exclusive_local"
    MUTUALLY_EXCLUSIVE_REMOTE = "mutually_exclusive_remote"


class TunnelConfigError(ConfigurationError):
    """Raised when a tunnel definition sets mutually exclusive attributes."""

    def __init__(self, tunnel_name: str, reason: ConfigErrorReason):
        self.tunnel_name = tunnel_name
        self.reason = reason
        side = "local" if reason == ConfigErrorReason.MUTUALLY_EXCLUSIVE_LOCAL else "remote"
        super().__init__(
            f"Tunnel '{tunnel_name}': {side}_port and {side}_socket are mutually exclusive"
        )


class ForwardSpecErrorReason(str, Enum):
    """Why a forward specification could not be built."""

    MISSING_LOCAL_PORT = "missing_local_port"
    MISSING_LOCAL_ENDPOINT = "missing_local_endpoint"
    MISSING_REMOTE_ENDPOINT = "missing_remote_endpoint"


class ForwardSpecError(SSHTunnelsError):
    """Raised when a forward specification cannot be derived for a tunnel."""

    _MESSAGES = {
        ForwardSpecErrorReason.MISSING_LOCAL_PORT: "dynamic tunnels need a local port",
        ForwardSpecErrorReason.MISSING_LOCAL_ENDPOINT: "no local port or socket",
        ForwardSpecErrorReason.MISSING_REMOTE_ENDPOINT: "no remote port or socket",
    }

    def __init__(self, tunnel_name: str, reason: ForwardSpecErrorReason):
        self.tunnel_name = tunnel_name
        self.reason = reason
        super().__init__(f"Tunnel '{tunnel_name}': {self._MESSAGES[reason]}")


class ProcessError(SSHTunnelsError):
    """Raised when the ssh client cannot be driven."""

    pass


class BinaryNotFoundError(ProcessError):
    """Raised when the ssh client binary is not found or not executable."""

    pass


class TunnelNotFoundError(SSHTunnelsError):
    """Raised when no tunnel with the requested name is configured."""

    pass
