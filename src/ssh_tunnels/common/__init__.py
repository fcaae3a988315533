"""Common utilities and shared functionality."""

from .exceptions import (
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
from .logging import get_logger, setup_logging, tunnel_context
from .utils import (
    MAX_PORT,
    MIN_PORT,
    bracket_host,
    parse_service_port,
    validate_port,
    validate_socket_name,
)

__all__ = [
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
    "tunnel_context",
    # Utils
    "validate_port",
    "validate_socket_name",
    "bracket_host",
    "parse_service_port",
    "MIN_PORT",
    "MAX_PORT",
]
