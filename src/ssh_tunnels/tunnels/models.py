"""Tunnel models.

This module defines the sparse tunnel definition supplied by the operator,
the fully resolved tunnel derived from it, and the closed enumerations used
throughout the package.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..common.utils import validate_socket_name


class TunnelType(str, Enum):
    """Tunnel type enumeration."""

    LOCAL = "local"
    REMOTE = "remote"
    DYNAMIC = "dynamic"
    SHELL = "shell"

    @property
    def flag(self) -> str | None:
        """ssh client flag carrying the forward specification."""
        return _TYPE_FLAGS[self]

    @classmethod
    def parse(cls, value: Any) -> "TunnelType":
        """Accept enum names, values and the client flag spellings."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip()
            for member, flag in _TYPE_FLAGS.items():
                if flag is not None and normalized == flag:
                    return member
            normalized = normalized.lower()
            if normalized in ("shell-managed", "shell_managed", "shellmanaged"):
                return cls.SHELL
            return cls(normalized)
        raise ValueError(f"Invalid tunnel type: {value!r}")


_TYPE_FLAGS: dict[TunnelType, str | None] = {
    TunnelType.LOCAL: "-L",
    TunnelType.REMOTE: "-R",
    TunnelType.DYNAMIC: "-D",
    TunnelType.SHELL: None,
}


class TunnelProperty(str, Enum):
    """Keys understood by the property resolver."""

    NAME = "name"
    TYPE = "type"
    LOGIN = "login"
    HOST = "host"
    LOCAL_PORT = "local-port"
    REMOTE_PORT = "remote-port"
    LOCAL_SOCKET = "local-socket"
    REMOTE_SOCKET = "remote-socket"


class ControlCommand(str, Enum):
    """Verbs of the control-socket protocol."""

    RUN = "run"
    CHECK = "check"
    KILL = "kill"


class TunnelState(str, Enum):
    """Result of querying a tunnel's master connection."""

    RUNNING = "running"
    STOPPED = "stopped"


class TunnelDefinition(BaseModel):
    """Sparse tunnel configuration record as written by the operator.

    Unset optional fields are None. Mutual exclusion of ports and sockets is
    checked by the validator rather than here, so that the raw record can
    still be inspected and reported on.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1, description="Unique tunnel name and control socket name")
    type: TunnelType = Field(default=TunnelType.LOCAL, description="Forwarding type")
    login: str = Field(min_length=1, description="ssh destination (user@host or client alias)")
    host: str | None = Field(default=None, description="Host the tunnel forwards to")
    local_port: int | None = Field(default=None, ge=1, le=65535)
    remote_port: int | None = Field(default=None, ge=1, le=65535)
    local_socket: str | None = Field(default=None, min_length=1)
    remote_socket: str | None = Field(default=None, min_length=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Names become control socket file names."""
        return validate_socket_name(v, "Tunnel name")

    @field_validator("type", mode="before")
    @classmethod
    def validate_type(cls, v: Any) -> TunnelType:
        """Accept "-L"/"-R"/"-D" as well as type names."""
        try:
            return TunnelType.parse(v)
        except ValueError as e:
            raise ValueError(
                f"Tunnel type must be one of {[t.value for t in TunnelType]}"
            ) from e

    def with_local_port(self, port: int) -> "TunnelDefinition":
        """Copy of this definition using an ad-hoc local port.

        Both local_port and local_socket are replaced, so the copy listens on
        the given port whatever the stored definition says.

        Args:
            port: Local port for this invocation only

        Returns:
            New definition; the original is left untouched
        """
        return self.model_validate(
            {**self.model_dump(), "local_port": port, "local_socket": None}
        )


class ResolvedTunnel(BaseModel):
    """Tunnel with every attribute defaulted, produced on demand."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: TunnelType
    login: str
    host: str
    local_port: int | None = None
    remote_port: int | None = None
    local_socket: str | None = None
    remote_socket: str | None = None

    @property
    def local_endpoint(self) -> int | str | None:
        """Local port if set, otherwise local socket."""
        return self.local_port if self.local_port is not None else self.local_socket

    @property
    def remote_endpoint(self) -> int | str | None:
        """Remote port if set, otherwise remote socket."""
        return self.remote_port if self.remote_port is not None else self.remote_socket


class TunnelInfo(BaseModel):
    """One row of a tunnel listing."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: TunnelType
    state: TunnelState
    login: str
    host: str
    local_endpoint: int | str | None = None
    remote_endpoint: int | str | None = None

    @property
    def is_running(self) -> bool:
        return self.state == TunnelState.RUNNING
