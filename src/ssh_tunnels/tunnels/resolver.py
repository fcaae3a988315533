"""Property resolution for tunnel definitions.

Endpoint attributes are resolved with a three-tier precedence:

1. the override recorded for a running tunnel (local endpoints only)
2. the value set explicitly in the definition
3. a structural default taken from the opposite side of the tunnel

Remote endpoints are never overridden.
"""

from typing import Any

from .models import ResolvedTunnel, TunnelDefinition, TunnelProperty
from .state import OverrideStateStore

DEFAULT_HOST = "localhost"


def _local_port(
    definition: TunnelDefinition, overrides: OverrideStateStore | None
) -> int | None:
    override = overrides.get(definition.name) if overrides is not None else None
    if override is not None:
        return override if isinstance(override, int) else None
    if definition.local_port is not None:
        return definition.local_port
    if definition.local_socket is None:
        return definition.remote_port
    return None


def _local_socket(
    definition: TunnelDefinition, overrides: OverrideStateStore | None
) -> str | None:
    override = overrides.get(definition.name) if overrides is not None else None
    if override is not None:
        return override if isinstance(override, str) else None
    if definition.local_socket is not None:
        return definition.local_socket
    if definition.local_port is None:
        return definition.remote_socket
    return None


def _remote_port(definition: TunnelDefinition) -> int | None:
    if definition.remote_port is not None:
        return definition.remote_port
    if definition.remote_socket is None:
        return definition.local_port
    return None


def _remote_socket(definition: TunnelDefinition) -> str | None:
    if definition.remote_socket is not None:
        return definition.remote_socket
    if definition.remote_port is None:
        return definition.local_socket
    return None


def resolve_property(
    definition: TunnelDefinition,
    prop: TunnelProperty | str,
    overrides: OverrideStateStore | None = None,
) -> Any:
    """Compute the effective value of one tunnel attribute.

    The key set is closed: name, type and login come back verbatim, host and
    the endpoint keys are defaulted. Any other key is rejected rather than
    passed through as a raw value, since definitions carry no extra fields.

    Args:
        definition: Tunnel definition to read
        prop: Attribute to resolve
        overrides: Override store consulted for local endpoints

    Returns:
        The effective value; None where nothing applies

    Raises:
        ValueError: If prop is not a known attribute
    """
    prop = TunnelProperty(prop)

    if prop == TunnelProperty.HOST:
        return definition.host if definition.host is not None else DEFAULT_HOST
    if prop == TunnelProperty.TYPE:
        return definition.type
    if prop == TunnelProperty.LOCAL_PORT:
        return _local_port(definition, overrides)
    if prop == TunnelProperty.LOCAL_SOCKET:
        return _local_socket(definition, overrides)
    if prop == TunnelProperty.REMOTE_PORT:
        return _remote_port(definition)
    if prop == TunnelProperty.REMOTE_SOCKET:
        return _remote_socket(definition)
    if prop == TunnelProperty.NAME:
        return definition.name
    return definition.login


def resolve_tunnel(
    definition: TunnelDefinition, overrides: OverrideStateStore | None = None
) -> ResolvedTunnel:
    """Resolve every attribute of a tunnel.

    Args:
        definition: Tunnel definition to resolve
        overrides: Override store consulted for local endpoints

    Returns:
        Fully populated tunnel; the definition itself is not modified
    """
    values = {
        prop.name.lower(): resolve_property(definition, prop, overrides)
        for prop in TunnelProperty
    }
    return ResolvedTunnel(**values)
