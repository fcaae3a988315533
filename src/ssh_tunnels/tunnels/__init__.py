"""Tunnel definitions, resolution and control-socket lifecycle."""

from .forward import build_forward_spec, forward_arguments
from .lookup import find_tunnel_for
from .manager import TunnelManager
from .models import (
    ControlCommand,
    ResolvedTunnel,
    TunnelDefinition,
    TunnelInfo,
    TunnelProperty,
    TunnelState,
    TunnelType,
)
from .process import ControlSocketExecutor
from .resolver import DEFAULT_HOST, resolve_property, resolve_tunnel
from .state import OverrideStateStore
from .validator import validate_tunnel

__all__ = [
    # Models
    "TunnelType",
    "TunnelProperty",
    "TunnelState",
    "ControlCommand",
    "TunnelDefinition",
    "ResolvedTunnel",
    "TunnelInfo",
    # Resolution
    "DEFAULT_HOST",
    "resolve_property",
    "resolve_tunnel",
    "validate_tunnel",
    "build_forward_spec",
    "forward_arguments",
    "find_tunnel_for",
    # Lifecycle
    "OverrideStateStore",
    "ControlSocketExecutor",
    "TunnelManager",
]
