"""ssh-tunnels - named SSH tunnels driven through ssh control sockets."""

from .common.exceptions import (
    BinaryNotFoundError,
    ConfigErrorReason,
    ConfigurationError,
    ForwardSpecError,
    ForwardSpecErrorReason,
    ProcessError,
    SSHTunnelsError,
    TunnelConfigError,
    TunnelNotFoundError,
)
from .common.logging import get_logger, setup_logging
from .config import SSHTunnelsConfig, load_config
from .hooks import AutoStartHook, ConnectionHook, ConnectionHooks, open_connection
from .tunnels import (
    ControlCommand,
    ControlSocketExecutor,
    OverrideStateStore,
    ResolvedTunnel,
    TunnelDefinition,
    TunnelInfo,
    TunnelManager,
    TunnelProperty,
    TunnelState,
    TunnelType,
    build_forward_spec,
    find_tunnel_for,
    resolve_property,
    resolve_tunnel,
    validate_tunnel,
)

# Setup logging on package initialization
setup_logging(level="WARNING")

__version__ = "0.1.0"


__all__ = [
    # Configuration
    "SSHTunnelsConfig",
    "load_config",
    # Models
    "TunnelDefinition",
    "ResolvedTunnel",
    "TunnelInfo",
    "TunnelType",
    "TunnelProperty",
    "TunnelState",
    "ControlCommand",
    # Core operations
    "resolve_property",
    "resolve_tunnel",
    "validate_tunnel",
    "build_forward_spec",
    "find_tunnel_for",
    "OverrideStateStore",
    "ControlSocketExecutor",
    "TunnelManager",
    # Auto-start integration
    "AutoStartHook",
    "ConnectionHook",
    "ConnectionHooks",
    "open_connection",
    # Exceptions
    "SSHTunnelsError",
    "ConfigurationError",
    "ConfigErrorReason",
    "TunnelConfigError",
    "ForwardSpecError",
    "ForwardSpecErrorReason",
    "ProcessError",
    "BinaryNotFoundError",
    "TunnelNotFoundError",
    # Logging
    "get_logger",
    "setup_logging",
]
