"""Validation of raw tunnel definitions."""

from ..common.exceptions import ConfigErrorReason, TunnelConfigError
from .models import TunnelDefinition


def validate_tunnel(definition: TunnelDefinition) -> None:
    """Reject definitions that set mutually exclusive endpoints.

    Only the raw fields are inspected. Resolved values would hide a
    conflict behind the defaulting rules, and overrides must not mask it.

    Args:
        definition: Tunnel definition to check

    Raises:
        TunnelConfigError: If both local_port and local_socket, or both
            remote_port and remote_socket, are set
    """
    if definition.local_port is not None and definition.local_socket is not None:
        raise TunnelConfigError(definition.name, ConfigErrorReason.MUTUALLY_EXCLUSIVE_LOCAL)
    if definition.remote_port is not None and definition.remote_socket is not None:
        raise TunnelConfigError(definition.name, ConfigErrorReason.MUTUALLY_EXCLUSIVE_REMOTE)
