"""Configuration for ssh-tunnels."""

import tempfile
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .common.exceptions import ConfigurationError, TunnelNotFoundError
from .common.logging import get_logger
from .tunnels.models import TunnelDefinition

logger = get_logger(__name__)


class SSHTunnelsConfig(BaseModel):
    """Client settings plus the ordered list of tunnel definitions."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    ssh_program: str = Field(default="ssh", min_length=1, description="ssh client binary")
    temp_directory: str = Field(
        default_factory=tempfile.gettempdir,
        min_length=1,
        description="Working directory holding the control sockets",
    )
    command_timeout: float | None = Field(
        default=None, gt=0, description="Timeout for each client invocation (None waits forever)"
    )
    tunnels: list[TunnelDefinition] = Field(
        default_factory=list, description="Tunnel definitions in display order"
    )

    @field_validator("tunnels")
    @classmethod
    def validate_unique_names(cls, v: list[TunnelDefinition]) -> list[TunnelDefinition]:
        """Control sockets are keyed by name, so names must be unique."""
        seen: set[str] = set()
        for tunnel in v:
            if tunnel.name in seen:
                raise ValueError(f"Duplicate tunnel name '{tunnel.name}'")
            seen.add(tunnel.name)
        return v

    def get_tunnel(self, name: str) -> TunnelDefinition:
        """Get a tunnel definition by name.

        Raises:
            TunnelNotFoundError: If no tunnel has this name
        """
        for tunnel in self.tunnels:
            if tunnel.name == name:
                return tunnel
        raise TunnelNotFoundError(f"Tunnel '{name}' not found")


def load_config(path: str | Path) -> SSHTunnelsConfig:
    """Load configuration from a TOML file.

    The file holds the top-level settings and one [[tunnels]] table per
    tunnel:

        ssh_program = "ssh"

        [[tunnels]]
        name = "db"
        login = "me@bastion"
        host = "db.internal"
        local_port = 1234
        remote_port = 3306

    Args:
        path: Path to the TOML file

    Returns:
        Parsed configuration

    Raises:
        ConfigurationError: If the file is missing, not valid TOML, or does
            not describe a valid configuration
    """
    config_path = Path(path).expanduser()
    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Config file not found: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in {config_path}: {e}") from e

    try:
        config = SSHTunnelsConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e

    logger.debug("Configuration loaded", path=str(config_path), tunnels=len(config.tunnels))
    return config
