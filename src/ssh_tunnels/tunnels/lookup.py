"""Lookup of the tunnel serving a host/port pair."""

from collections.abc import Iterable

from ..common.utils import parse_service_port
from .models import TunnelDefinition, TunnelProperty, TunnelType
from .resolver import resolve_property
from .state import OverrideStateStore


def find_tunnel_for(
    definitions: Iterable[TunnelDefinition],
    host: str,
    service: int | str,
    overrides: OverrideStateStore | None = None,
) -> TunnelDefinition | None:
    """Find the first tunnel whose local end is host:service.

    Shell tunnels and socket endpoints are never matched, and service names
    are not looked up: only numeric services can match.

    Args:
        definitions: Tunnel definitions in configuration order
        host: Host a connection is about to be opened to
        service: Port number or numeric string
        overrides: Override store consulted for local ports

    Returns:
        Matching definition, or None
    """
    port = parse_service_port(service)
    if port is None:
        return None

    for definition in definitions:
        if resolve_property(definition, TunnelProperty.TYPE) == TunnelType.SHELL:
            continue
        if resolve_property(definition, TunnelProperty.HOST) != host:
            continue
        if resolve_property(definition, TunnelProperty.LOCAL_PORT, overrides) == port:
            return definition
    return None
