"""Utility functions shared by the tunnel modules."""

MIN_PORT = 1
MAX_PORT = 65535


def validate_port(port: int, port_name: str = "Port") -> int:
    """Validate port number range.

    Args:
        port: Port number to validate
        port_name: Name of the port for error messages

    Returns:
        The port, unchanged

    Raises:
        ValueError: If port is not an int in 1-65535
    """
    if isinstance(port, bool) or not isinstance(port, int) or not (MIN_PORT <= port <= MAX_PORT):
        raise ValueError(f"{port_name} must be between {MIN_PORT} and {MAX_PORT}")
    return port


def validate_socket_name(value: str, field_name: str = "Name") -> str:
    """Validate that a value can be used as a file name inside a directory.

    Args:
        value: Candidate name
        field_name: Name of the field for error messages

    Returns:
        The value, unchanged

    Raises:
        ValueError: If the value is empty, a dot entry, or contains a path
            separator, whitespace, NUL or '%', or starts with '~'
    """
    if not value or not value.strip():
        raise ValueError(f"{field_name} cannot be empty")
    if value in (".", ".."):
        raise ValueError(f"{field_name} cannot be '{value}'")
    if "/" in value or "\x00" in value or any(char.isspace() for char in value):
        raise ValueError(
            f"{field_name} must not contain '/', whitespace or NUL characters"
        )
    # ssh expands %-tokens and a leading ~ in control paths
    if "%" in value or value.startswith("~"):
        raise ValueError(f"{field_name} must not contain '%' or start with '~'")
    return value


def bracket_host(host: str) -> str:
    """Wrap IPv6 literals in brackets for use inside a forward specification."""
    if ":" in host:
        return f"[{host}]"
    return host


def parse_service_port(service: int | str) -> int | None:
    """Convert a service identifier to a port number.

    Only numeric services are understood; names such as "http" are not
    looked up and yield None.

    Args:
        service: Port number or numeric string

    Returns:
        The port number, or None if the service is not numeric
    """
    if isinstance(service, bool):
        return None
    if isinstance(service, int):
        return service
    if isinstance(service, str):
        text = service.strip()
        # ASCII digits only
        if text.isascii() and text.isdecimal():
            return int(text)
    return None
