"""Forward specification builder for ssh -L/-R/-D arguments."""

from ..common.exceptions import ForwardSpecError, ForwardSpecErrorReason
from ..common.utils import bracket_host
from .models import ResolvedTunnel, TunnelType


def _require_endpoints(tunnel: ResolvedTunnel) -> tuple[int | str, int | str]:
    local = tunnel.local_endpoint
    remote = tunnel.remote_endpoint
    if local is None:
        raise ForwardSpecError(tunnel.name, ForwardSpecErrorReason.MISSING_LOCAL_ENDPOINT)
    if remote is None:
        raise ForwardSpecError(tunnel.name, ForwardSpecErrorReason.MISSING_REMOTE_ENDPOINT)
    return local, remote


def build_forward_spec(tunnel: ResolvedTunnel) -> str:
    """Build the forwarding argument for a resolved tunnel.

    Examples:
        local   1234:db.internal:3306  or  /tmp/l.sock:/tmp/r.sock
        remote  3306:db.internal:1234  or  /tmp/r.sock:/tmp/l.sock
        dynamic localhost:1080

    Args:
        tunnel: Resolved tunnel

    Returns:
        Argument for the client's -L, -R or -D flag

    Raises:
        ForwardSpecError: If a required endpoint is missing
        ValueError: If called for a shell tunnel, which has no forward
    """
    host = bracket_host(tunnel.host)

    if tunnel.type == TunnelType.SHELL:
        raise ValueError(f"Tunnel '{tunnel.name}' is shell-managed and has no forward spec")

    if tunnel.type == TunnelType.DYNAMIC:
        if tunnel.local_port is None:
            raise ForwardSpecError(tunnel.name, ForwardSpecErrorReason.MISSING_LOCAL_PORT)
        return f"{host}:{tunnel.local_port}"

    local, remote = _require_endpoints(tunnel)
    both_sockets = tunnel.local_port is None and tunnel.remote_port is None

    if tunnel.type == TunnelType.REMOTE:
        if both_sockets:
            return f"{tunnel.remote_socket}:{tunnel.local_socket}"
        return f"{remote}:{host}:{local}"

    if both_sockets:
        return f"{tunnel.local_socket}:{tunnel.remote_socket}"
    return f"{local}:{host}:{remote}"


def forward_arguments(tunnel: ResolvedTunnel) -> list[str]:
    """Client arguments that set up the tunnel's forward.

    Returns:
        [] for shell tunnels, otherwise [flag, spec]
    """
    if tunnel.type.flag is None:
        return []
    return [tunnel.type.flag, build_forward_spec(tunnel)]
